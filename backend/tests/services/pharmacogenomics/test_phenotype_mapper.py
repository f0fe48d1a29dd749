"""
Unit tests for phenotype mapper and diplotype resolution.
Tests the star allele calling algorithm and phenotype determination.
"""

import pytest
from app.services.pharmacogenomics.phenotype_mapper import (
    DiplotypeResolver,
    PhenotypeMapper,
    normalize_allele,
)
from app.services.pharmacogenomics.phenotype_rules import IM, NM, PM, UNKNOWN_PHENOTYPE
from app.services.vcf.parser import VcfVariant


def variant(star, gt, gene="CYP2C19"):
    return VcfVariant(chrom="chr10", pos=1, ref="G", alt="A", gene=gene, star=star, gt=gt)


class TestDiplotypeResolver:
    """Test diplotype resolution logic."""

    @pytest.fixture
    def resolver(self):
        """Create a DiplotypeResolver instance."""
        return DiplotypeResolver()

    def test_no_variants(self, resolver):
        """Empty input carries no diplotype information"""
        assert resolver.resolve([]) is None

    def test_only_reference_genotypes(self, resolver):
        """0/0 records are not evidence of anything"""
        assert resolver.resolve([variant("*2", "0/0"), variant("*3", None)]) is None

    def test_single_heterozygous(self, resolver):
        """One het allele X -> *1/X"""
        result = resolver.resolve([variant("*2", "0/1")])

        assert (result.allele1, result.allele2) == ("*1", "*2")
        assert not result.hard_limit_exceeded

    def test_two_heterozygous_encounter_order(self, resolver):
        """Compound heterozygote keeps first-seen order, no sorting"""
        result = resolver.resolve([variant("*3", "0/1"), variant("*2", "1|0")])

        assert (result.allele1, result.allele2) == ("*3", "*2")

    def test_duplicate_heterozygous_counted_once(self, resolver):
        """Two records for the same allele -> still *1/X"""
        result = resolver.resolve([variant("*2", "0/1"), variant("*2", "0|1")])

        assert (result.allele1, result.allele2) == ("*1", "*2")

    def test_homozygous_alt_wins(self, resolver):
        """First 1/1 record fills both slots; het records are ignored"""
        result = resolver.resolve([
            variant("*2", "0/1"),
            variant("*3", "1/1"),
            variant("*17", "1|1"),
        ])

        assert (result.allele1, result.allele2) == ("*3", "*3")
        assert not result.hard_limit_exceeded

    def test_more_than_two_alleles_truncated(self, resolver):
        """Diploid hard limit: keep first two, flag the condition"""
        result = resolver.resolve([
            variant("*2", "0/1"),
            variant("*3", "0/1"),
            variant("*17", "0/1"),
        ])

        assert (result.allele1, result.allele2) == ("*2", "*3")
        assert result.hard_limit_exceeded

    def test_bare_star_names_normalized(self, resolver):
        result = resolver.resolve([variant("2", "0/1")])

        assert result.allele2 == "*2"


class TestNormalizeAllele:

    @pytest.mark.parametrize("raw,expected", [
        ("*2", "*2"),
        ("2", "*2"),
        ("3A", "*3A"),
        (" *17 ", "*17"),
        ("", "*1"),
        (None, "*1"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_allele(raw) == expected


class TestPhenotypeMapper:
    """Profiles built from resolved alleles."""

    @pytest.fixture
    def mapper(self):
        return PhenotypeMapper()

    def test_process_gene(self, mapper):
        profile, resolution = mapper.process_gene("CYP2C19", [variant("*2", "0/1")])

        assert profile.gene == "CYP2C19"
        assert profile.diplotype == "*1/*2"
        assert profile.phenotype == IM
        assert resolution.allele2 == "*2"

    def test_process_gene_reversed_order_lookup(self, mapper):
        """*3/*2 is not in the table as written but *2/*3 is"""
        profile, _ = mapper.process_gene("CYP2C19", [variant("*3", "0/1"), variant("*2", "0/1")])

        assert profile.diplotype == "*3/*2"
        assert profile.phenotype == PM

    def test_process_gene_no_information(self, mapper):
        assert mapper.process_gene("CYP2C19", [variant("*2", "0/0")]) == (None, None)

    def test_unlisted_diplotype(self, mapper):
        profile, _ = mapper.process_gene("CYP2C19", [variant("*9", "1/1")])

        assert profile.phenotype == UNKNOWN_PHENOTYPE

    def test_default_profile(self, mapper):
        profile = mapper.default_profile("TPMT")

        assert profile.diplotype == "*1/*1"
        assert profile.phenotype == NM
