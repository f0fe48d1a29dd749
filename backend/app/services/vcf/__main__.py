from __future__ import annotations

import json
import sys
from pathlib import Path

from app.services.pharmacogenomics.interpretation import InterpretationService
from app.services.pharmacogenomics.risk_engine import RiskEngine

from .parser import parse_vcf
from .variant_extractor import extract_pharmacogenes

USAGE = "Usage: python -m app.services.vcf <path-to.vcf> [--drugs CODEINE,WARFARIN]"


def main(argv: list[str]) -> int:
    if len(argv) < 2 or "--help" in argv:
        print(USAGE)
        return 0

    path = Path(argv[1])
    if not path.exists():
        print(f"File not found: {path}")
        return 2

    drugs = None
    if "--drugs" in argv:
        try:
            drugs = argv[argv.index("--drugs") + 1]
        except IndexError:
            print("Error: --drugs requires a comma-separated list")
            return 2

    parsed = parse_vcf(path)
    by_gene = extract_pharmacogenes(parsed.variants)
    profiles = InterpretationService().interpret(parsed.variants)

    payload = {
        "metadata": parsed.metadata,
        "quality_metrics": {
            "vcf_parsing_success": parsed.success,
            "variant_count_kept": len(parsed.variants),
            "error_count": len(parsed.errors),
        },
        "errors": parsed.errors,
        "pharmacogene_variant_counts": {g: len(vs) for g, vs in by_gene.items()},
        "gene_profiles": [p.model_dump() for p in profiles],
    }
    if drugs is not None:
        payload["drug_risks"] = [
            r.model_dump(mode="json") for r in RiskEngine().evaluate(profiles, drugs)
        ]

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
