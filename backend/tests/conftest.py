"""Shared fixtures: VCF text builders and a clean configuration per test."""

import pytest

from app.services.pharmacogenomics.config import reset_config

VCF_HEADER = (
    "##fileformat=VCFv4.2\n"
    "##reference=GRCh38\n"
    "##INFO=<ID=GENE,Number=1,Type=String,Description=\"Gene symbol\">\n"
    "##INFO=<ID=STAR,Number=1,Type=String,Description=\"Star allele\">\n"
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\tSAMPLE1\n"
)


def _vcf_record(gene, star, gt, rsid="rs0", chrom="chr22", pos=100, info_extra=""):
    info = f"GENE={gene};STAR={star}{info_extra}"
    return f"{chrom}\t{pos}\t{rsid}\tC\tT\t99\tPASS\t{info}\tGT\t{gt}\n"


def _build_vcf(*records):
    return VCF_HEADER + "".join(records)


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Defaults for every test; no real LLM key leaks in from the environment."""
    monkeypatch.delenv("GROQ_API_KEY", raising=False)
    monkeypatch.delenv("PHARMAGUARD_DEV_ENDPOINTS", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def vcf_record():
    """Builder for one tab-separated data line annotated with GENE and STAR."""
    return _vcf_record


@pytest.fixture
def build_vcf():
    """Builder for a complete VCF document from data lines."""
    return _build_vcf
