"""
Interpretation - variant list → one GeneProfile per panel gene.

    VcfVariant list
        │  filter  (het / hom-alt with a gene only)
        │  group   (by gene)
        │  resolve (DiplotypeResolver → two alleles)
        │  lookup  (phenotype rule table)
        │  backfill (*1/*1 for panel genes without actionable variants)
        ▼
    List[GeneProfile], sorted by gene

A gene missing from the output would be indistinguishable from "not
tested", so every panel gene is always reported.
"""

import logging
from typing import Dict, Iterable, List, Optional

from app.services.vcf.parser import VcfVariant
from app.services.vcf.variant_extractor import extract_pharmacogenes

from .models import GeneProfile
from .phenotype_mapper import PhenotypeMapper

logger = logging.getLogger(__name__)

REQUIRED_PANEL = frozenset({"CYP2D6", "CYP2C19", "CYP2C9", "SLCO1B1", "TPMT", "DPYD"})


class InterpretationService:
    """
    Runs filter → group → resolve → lookup → backfill for one request.

    ``diagnostics`` receives warnings about suspect input (more than two
    heterozygous alleles for a gene). Defaults to this module's logger.
    """

    def __init__(
        self,
        mapper: Optional[PhenotypeMapper] = None,
        diagnostics: Optional[logging.Logger] = None,
    ):
        self.mapper = mapper or PhenotypeMapper()
        self.diagnostics = diagnostics or logger

    def interpret(self, variants: Optional[Iterable[VcfVariant]]) -> List[GeneProfile]:
        by_gene = extract_pharmacogenes(list(variants or ()))

        resolved: Dict[str, GeneProfile] = {}
        for gene, gene_variants in by_gene.items():
            if gene not in REQUIRED_PANEL:
                continue
            profile, resolution = self.mapper.process_gene(gene, gene_variants)
            if profile is None:
                continue
            if resolution.hard_limit_exceeded:
                self.diagnostics.warning(
                    "More than two heterozygous alleles for %s; only %s and %s used. "
                    "Check VCF annotation quality.",
                    gene, resolution.allele1, resolution.allele2,
                )
            resolved[gene] = profile

        for gene in REQUIRED_PANEL - resolved.keys():
            resolved[gene] = self.mapper.default_profile(gene)

        profiles = sorted(resolved.values(), key=lambda p: p.gene)
        logger.debug(
            "Interpreted %d genes: %s",
            len(profiles), ", ".join(f"{p.gene} {p.diplotype}" for p in profiles),
        )
        return profiles
