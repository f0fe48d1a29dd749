from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from .parser import VcfVariant


def filter_actionable(variants: Optional[Iterable[VcfVariant]]) -> List[VcfVariant]:
    """
    Keep heterozygous and homozygous-alt records that carry a gene annotation.

    0/0 and missing/other genotypes say nothing about the diplotype and are
    dropped silently.
    """
    return [v for v in (variants or ()) if v.is_actionable]


def extract_pharmacogenes(
    variants: Optional[Sequence[VcfVariant]],
) -> Dict[str, List[VcfVariant]]:
    """
    Group actionable variants by gene.

    Records keep their input order inside each group; groups come back
    sorted by gene symbol so downstream iteration is deterministic.
    """
    out: Dict[str, List[VcfVariant]] = {}
    for v in filter_actionable(variants):
        out.setdefault(v.gene, []).append(v)
    return {g: out[g] for g in sorted(out)}
