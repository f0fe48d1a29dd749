"""
phenotype_rules.py
==================
Diplotype → phenotype rule tables for the six panel genes.

Each diplotype is written once, in its usual clinical order ("*1/*2").
Lookup tries both orderings, so *2/*1 resolves to the same phenotype.

  *1                 = fully functional reference allele
  loss-of-function   = reduced or absent activity (*2, *3, *4 ...)
  gain-of-function   = increased activity (CYP2C19 *17, CYP2D6 xN duplications)

Genes or diplotypes outside the tables resolve to ``UNKNOWN_PHENOTYPE``.

Sources: CPIC guidelines (https://cpicpgx.org/genes-drugs/)
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

UNKNOWN_PHENOTYPE = "UNKNOWN"

NM = "NM – Normal Metabolizer"
IM = "IM – Intermediate Metabolizer"
PM = "PM – Poor Metabolizer"
RM = "RM – Rapid Metabolizer"
UM = "UM – Ultrarapid Metabolizer"

SLCO1B1_NORMAL = "Normal Function"
SLCO1B1_DECREASED = "Decreased Function – Increased Statin Myopathy Risk"
SLCO1B1_POOR = "Poor Function – High Statin Myopathy Risk"


def _freeze(table: dict) -> Mapping[str, str]:
    return MappingProxyType(dict(table))


PHENOTYPE_RULES: Mapping[str, Mapping[str, str]] = MappingProxyType({

    # ── CYP2C19 ─────────────────────────────────────────────────────────────
    # clopidogrel, PPIs, SSRIs. LOF: *2, *3  GOF: *17
    "CYP2C19": _freeze({
        "*1/*1":   NM,
        "*1/*2":   IM,
        "*1/*3":   IM,
        "*2/*2":   PM,
        "*2/*3":   PM,
        "*3/*3":   PM,
        "*1/*17":  RM,
        "*2/*17":  IM,   # one LOF offsets one GOF
        "*17/*17": UM,
    }),

    # ── CYP2D6 ──────────────────────────────────────────────────────────────
    # codeine, tamoxifen. LOF: *3, *4, *5, *6  GOF: xN duplication
    "CYP2D6": _freeze({
        "*1/*1":   NM,
        "*1/*2":   NM,
        "*2/*2":   NM,
        "*1/*4":   IM,
        "*1/*5":   IM,
        "*1/*6":   IM,
        "*4/*4":   PM,
        "*4/*5":   PM,
        "*5/*5":   PM,
        "*3/*4":   PM,
        "*4/*6":   PM,
        "*1/*1xN": UM,
        "*1/*2xN": UM,
    }),

    # ── CYP2C9 ──────────────────────────────────────────────────────────────
    # warfarin, NSAIDs, phenytoin. LOF: *2, *3
    "CYP2C9": _freeze({
        "*1/*1": NM,
        "*1/*2": IM,
        "*1/*3": IM,
        "*2/*2": IM,
        "*2/*3": PM,
        "*3/*3": PM,
    }),

    # ── SLCO1B1 ─────────────────────────────────────────────────────────────
    # hepatic statin transporter. *5 (rs4149056) and *15 reduce transport
    "SLCO1B1": _freeze({
        "*1/*1":   SLCO1B1_NORMAL,
        "*1/*5":   SLCO1B1_DECREASED,
        "*1/*15":  SLCO1B1_DECREASED,
        "*5/*5":   SLCO1B1_POOR,
        "*5/*15":  SLCO1B1_POOR,
        "*15/*15": SLCO1B1_POOR,
    }),

    # ── TPMT ────────────────────────────────────────────────────────────────
    # thiopurines. LOF: *2, *3A, *3B, *3C
    "TPMT": _freeze({
        "*1/*1":   NM,
        "*1/*2":   IM,
        "*1/*3A":  IM,
        "*1/*3B":  IM,
        "*1/*3C":  IM,
        "*2/*3A":  PM,
        "*3A/*3A": PM,
        "*3A/*3C": PM,
        "*3C/*3C": PM,
    }),

    # ── DPYD ────────────────────────────────────────────────────────────────
    # fluoropyrimidines. LOF: *2A (splice), *13 (c.1679T>G)
    "DPYD": _freeze({
        "*1/*1":   NM,
        "*1/*2A":  IM,
        "*1/*13":  IM,
        "*2A/*2A": PM,
        "*2A/*13": PM,
        "*13/*13": PM,
    }),
})


def lookup_phenotype(gene: str, allele1: str, allele2: str) -> str:
    """
    Phenotype for ``gene`` carrying ``allele1`` and ``allele2``.

    Order-independent: tries "A/B" then "B/A". Never raises; unknown genes
    and diplotypes give ``UNKNOWN_PHENOTYPE``.
    """
    gene_rules = PHENOTYPE_RULES.get(gene)
    if gene_rules is None:
        return UNKNOWN_PHENOTYPE

    for key in (f"{allele1}/{allele2}", f"{allele2}/{allele1}"):
        if key in gene_rules:
            return gene_rules[key]
    return UNKNOWN_PHENOTYPE


def is_unknown_phenotype(phenotype: Optional[str]) -> bool:
    return phenotype is None or phenotype.startswith(UNKNOWN_PHENOTYPE)
