"""
Phenotype Mapper - Diplotype resolution and phenotype determination.

Reduces the actionable variants of one gene to exactly two star alleles,
then maps the pair to a phenotype through the static rule table.

Resolution is a pure function of its input. It reports the diploid
hard-limit condition on the returned Resolution and leaves logging to
the caller.
"""

from typing import List, Optional, Sequence, Tuple

from app.services.vcf.parser import VcfVariant

from .models import GeneProfile, Resolution
from .phenotype_rules import lookup_phenotype

REFERENCE_ALLELE = "*1"

# Humans are diploid: at most two alleles per autosomal gene
MAX_ALLELES = 2


def normalize_allele(allele: Optional[str]) -> str:
    """Guarantee the '*' prefix. Bare names like "2" or "3A" are accepted."""
    if allele is None or not allele.strip():
        return REFERENCE_ALLELE
    allele = allele.strip()
    return allele if allele.startswith("*") else f"*{allele}"


class DiplotypeResolver:
    """
    Resolves the variants of ONE gene into two alleles.

    Priority (strict):
      1. Homozygous-alt: the first 1/1 record fills both slots; any het
         records for the gene are ignored.
      2. One distinct het allele X: *1/X (other chromosome assumed reference).
      3. Two distinct het alleles X, Y: X/Y in encounter order.
      4. More than two: first two in encounter order, hard_limit_exceeded set.
    """

    @staticmethod
    def resolve(variants: Sequence[VcfVariant]) -> Optional[Resolution]:
        """Return a Resolution, or None when no record is het or hom-alt."""
        if not variants:
            return None

        for v in variants:
            if v.is_homozygous_alt:
                star = normalize_allele(v.star)
                return Resolution(allele1=star, allele2=star)

        # Distinct het alleles, first-seen order
        seen: List[str] = []
        for v in variants:
            if v.is_heterozygous:
                allele = normalize_allele(v.star)
                if allele not in seen:
                    seen.append(allele)

        if not seen:
            return None

        if len(seen) == 1:
            return Resolution(allele1=REFERENCE_ALLELE, allele2=seen[0])

        return Resolution(
            allele1=seen[0],
            allele2=seen[1],
            hard_limit_exceeded=len(seen) > MAX_ALLELES,
        )


class PhenotypeMapper:
    """Builds a GeneProfile for one gene from its variants."""

    def __init__(self, resolver: Optional[DiplotypeResolver] = None):
        self.resolver = resolver or DiplotypeResolver()

    def process_gene(
        self, gene: str, variants: Sequence[VcfVariant]
    ) -> Tuple[Optional[GeneProfile], Optional[Resolution]]:
        """
        Returns (profile, resolution). Both are None when the variants carry
        no diplotype information.
        """
        resolution = self.resolver.resolve(variants)
        if resolution is None:
            return None, None
        phenotype = lookup_phenotype(gene, resolution.allele1, resolution.allele2)
        profile = GeneProfile(
            gene=gene,
            allele1=resolution.allele1,
            allele2=resolution.allele2,
            phenotype=phenotype,
        )
        return profile, resolution

    def default_profile(self, gene: str) -> GeneProfile:
        """*1/*1 profile; phenotype still comes from the rule table."""
        return GeneProfile(
            gene=gene,
            allele1=REFERENCE_ALLELE,
            allele2=REFERENCE_ALLELE,
            phenotype=lookup_phenotype(gene, REFERENCE_ALLELE, REFERENCE_ALLELE),
        )
