from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import IO, Dict, Iterable, Iterator, List, Mapping, Optional, Set, Union


logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Constants & Configuration
# ----------------------------------------------------------------------

TARGET_PHARMACOGENES: Set[str] = {
    "CYP2D6",
    "CYP2C19",
    "CYP2C9",
    "SLCO1B1",
    "TPMT",
    "DPYD",
}

# Header keys captured into the metadata mapping
CAPTURED_META_KEYS = ("fileformat", "reference")

MIN_DATA_COLUMNS = 8
ERROR_SNIPPET_LENGTH = 50

# VCF 4.x fixed column order, used until a #CHROM line says otherwise
DEFAULT_COLUMNS = ("CHROM", "POS", "ID", "REF", "ALT", "QUAL", "FILTER", "INFO", "FORMAT")
SAMPLE_COLUMN = "SAMPLE"

HETEROZYGOUS_GT = frozenset({"0/1", "1/0", "0|1", "1|0"})
HOMOZYGOUS_ALT_GT = frozenset({"1/1", "1|1"})
HOMOZYGOUS_REF_GT = frozenset({"0/0", "0|0"})


@dataclass(frozen=True)
class VcfVariant:
    chrom: str
    pos: int
    ref: str
    alt: str
    rsid: Optional[str] = None
    filter: Optional[str] = None
    gene: str = ""
    star: str = ""
    gt: Optional[str] = None
    info: Mapping[str, str] = field(default_factory=dict)

    @property
    def zygosity(self) -> str:
        return infer_zygosity(self.gt)

    @property
    def is_heterozygous(self) -> bool:
        return self.gt in HETEROZYGOUS_GT

    @property
    def is_homozygous_alt(self) -> bool:
        return self.gt in HOMOZYGOUS_ALT_GT

    @property
    def is_actionable(self) -> bool:
        """Het or hom-alt with a gene annotation: the only records carrying diplotype information."""
        return bool(self.gene) and (self.is_heterozygous or self.is_homozygous_alt)

    def to_dict(self) -> Dict[str, object]:
        return {
            "chrom": self.chrom,
            "pos": self.pos,
            "rsid": self.rsid,
            "ref": self.ref,
            "alt": self.alt,
            "filter": self.filter,
            "gene": self.gene,
            "star": self.star,
            "gt": self.gt,
            "zygosity": self.zygosity,
            "info": dict(self.info),
        }


@dataclass
class VcfParseResult:
    variants: List[VcfVariant]
    metadata: Dict[str, str]
    errors: List[str]

    @property
    def success(self) -> bool:
        return not self.errors

    def variants_by_gene(self, gene: str) -> List[VcfVariant]:
        return [v for v in self.variants if v.gene.upper() == gene.upper()]

    def to_dict(self) -> Dict[str, object]:
        return {
            "variants": [v.to_dict() for v in self.variants],
            "metadata": dict(self.metadata),
            "errors": list(self.errors),
        }


def parse_vcf(content: Union[str, bytes, Path, IO[str], Iterable[str]]) -> VcfParseResult:
    """
    Parse VCF v4.x text and keep the records annotated with one of the
    six target pharmacogenes.

    Malformed data lines never abort the parse: they are recorded in
    ``errors`` and skipped. Only failures reading the stream itself propagate.
    """
    variants: List[VcfVariant] = []
    metadata: Dict[str, str] = {}
    errors: List[str] = []
    layout = _column_layout(DEFAULT_COLUMNS)
    parsed_count = 0

    for raw in _normalize_to_lines(content):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        if line.startswith("##"):
            _parse_meta_line(line, metadata)
            continue
        if line.startswith("#CHROM"):
            layout = _column_layout(line[1:].split("\t"))
            continue
        if line.startswith("#"):
            continue

        variant = _parse_variant_line(line, layout, errors)
        if variant is None:
            continue
        parsed_count += 1
        if variant.gene in TARGET_PHARMACOGENES:
            variants.append(variant)

    logger.info(
        "Parsed VCF: %d records, %d kept for target genes, %d errors",
        parsed_count, len(variants), len(errors),
    )
    return VcfParseResult(variants=variants, metadata=metadata, errors=errors)


def _normalize_to_lines(content: Union[str, bytes, Path, IO[str], Iterable[str]]) -> Iterator[str]:
    if isinstance(content, Path):
        with content.open("r", encoding="utf-8", errors="replace", newline="") as f:
            yield from f
        return
    if isinstance(content, bytes):
        content = content.decode("utf-8", errors="replace")
    if isinstance(content, str):
        # Only \n, \r and \r\n end a line, same as reading from a file
        yield from io.StringIO(content, newline="")
        return
    for line in content:
        if isinstance(line, bytes):
            line = line.decode("utf-8", errors="replace")
        yield line


def _column_layout(header: Iterable[str]) -> Dict[str, int]:
    """
    Map column names to positions. The first column after FORMAT is the
    (single) sample column, whatever its name.
    """
    layout: Dict[str, int] = {}
    for i, name in enumerate(header):
        name = name.strip().upper()
        if name in DEFAULT_COLUMNS:
            layout.setdefault(name, i)
        elif "FORMAT" in layout and SAMPLE_COLUMN not in layout:
            layout[SAMPLE_COLUMN] = i
    for i, name in enumerate(DEFAULT_COLUMNS):
        layout.setdefault(name, i)
    layout.setdefault(SAMPLE_COLUMN, layout["FORMAT"] + 1)
    return layout


def _parse_meta_line(line: str, metadata: Dict[str, str]) -> None:
    # e.g. ##fileformat=VCFv4.2 or ##INFO=<...>
    body = line[2:]
    if "=" not in body:
        return
    key, value = body.split("=", 1)
    if key in CAPTURED_META_KEYS:
        metadata[key] = value


def _parse_info_field(info: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    if info in (".", ""):
        return out
    for item in info.split(";"):
        if not item:
            continue
        if "=" not in item:
            out[item] = "true"
            continue
        k, v = item.split("=", 1)
        out[k] = v
    return out


def _extract_genotype(format_col: str, sample_col: str) -> Optional[str]:
    keys = format_col.split(":")
    values = sample_col.split(":")
    for i, key in enumerate(keys):
        if key == "GT" and i < len(values):
            return values[i]
    return None


def _snippet(line: str) -> str:
    return line[:ERROR_SNIPPET_LENGTH]


def _column(cols: List[str], layout: Mapping[str, int], name: str) -> Optional[str]:
    i = layout[name]
    return cols[i] if i < len(cols) else None


def _parse_variant_line(
    line: str, layout: Mapping[str, int], errors: List[str]
) -> Optional[VcfVariant]:
    cols = line.split("\t")
    if len(cols) < MIN_DATA_COLUMNS:
        errors.append(f"Malformed line (too few columns): {_snippet(line)}")
        logger.debug("Skipping line with %d columns", len(cols))
        return None

    pos_s = _column(cols, layout, "POS") or ""
    if not (pos_s.isascii() and pos_s.isdigit()) or int(pos_s) < 1:
        errors.append(f"Could not parse position in line: {_snippet(line)}")
        logger.debug("Skipping line with bad position %r", pos_s)
        return None
    pos = int(pos_s)

    info = _parse_info_field(_column(cols, layout, "INFO") or "")

    vid = _column(cols, layout, "ID") or ""
    rsid = vid if vid.startswith("rs") else info.get("RS", vid)

    # Genotype: the GT offset in FORMAT, read at the same offset in the sample column
    gt: Optional[str] = None
    format_col = _column(cols, layout, "FORMAT")
    sample_col = _column(cols, layout, SAMPLE_COLUMN)
    if format_col is not None and sample_col is not None:
        gt = _extract_genotype(format_col, sample_col)

    return VcfVariant(
        chrom=_column(cols, layout, "CHROM") or "",
        pos=pos,
        ref=_column(cols, layout, "REF") or "",
        alt=_column(cols, layout, "ALT") or "",
        rsid=rsid,
        filter=_column(cols, layout, "FILTER"),
        gene=info.get("GENE", ""),
        star=info.get("STAR", ""),
        gt=gt,
        info=MappingProxyType(info),
    )


def infer_zygosity(gt: Optional[str]) -> str:
    """
    Classify a VCF GT string.

    Returns:
      'Hom-Ref'  : 0/0 or 0|0
      'Het'      : 0/1, 1/0, 0|1, 1|0
      'Hom-Alt'  : 1/1 or 1|1
      'Unknown'  : missing or any other form
    """
    if gt in HOMOZYGOUS_REF_GT:
        return "Hom-Ref"
    if gt in HETEROZYGOUS_GT:
        return "Het"
    if gt in HOMOZYGOUS_ALT_GT:
        return "Hom-Alt"
    return "Unknown"
