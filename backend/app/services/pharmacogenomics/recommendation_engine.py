"""
Recommendation Engine - static clinical guidance per drug and risk label.

Lookup key: (DRUG, risk label), e.g. ("CODEINE", "Toxic").
Every supported drug has an entry for all five risk labels; anything else
falls back to a "seek specialist review" entry. Guidance follows published
CPIC guidelines (cpicpgx.org). No algorithmic content lives here.
"""

from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from .models import RiskLabel


class ClinicalGuidance(BaseModel):
    """Guidance text for one drug/risk label pair."""
    model_config = ConfigDict(frozen=True)

    action: str = Field(..., description="Short clinical action")
    recommendation: str = Field(..., description="Recommendation text")
    monitoring: str = Field(..., description="Monitoring advice")


UNKNOWN_GUIDANCE = ClinicalGuidance(
    action="Seek specialist review",
    recommendation="Pharmacogenomic result is inconclusive. Consult clinical pharmacologist.",
    monitoring="Monitor clinically and consider repeat genotyping.",
)


def _g(action: str, recommendation: str, monitoring: str) -> ClinicalGuidance:
    return ClinicalGuidance(action=action, recommendation=recommendation, monitoring=monitoring)


GUIDANCE_TABLE: Mapping[Tuple[str, RiskLabel], ClinicalGuidance] = MappingProxyType({

    # ── CODEINE (CYP2D6) ────────────────────────────────────────────────────
    # CYP2D6 converts codeine → morphine.
    ("CODEINE", RiskLabel.SAFE): _g(
        "Proceed with standard dosing",
        "Codeine can be used at standard doses. No dose adjustment required.",
        "Standard pain reassessment at follow-up."),
    ("CODEINE", RiskLabel.ADJUST_DOSAGE): _g(
        "Consider dose reduction or alternative",
        "Reduced CYP2D6 activity may lower morphine conversion. Start at 50% of standard dose "
        "or switch to a non-codeine analgesic.",
        "Monitor analgesic efficacy and sedation. Reassess within 48 hours."),
    ("CODEINE", RiskLabel.INEFFECTIVE): _g(
        "Avoid codeine — use alternative analgesic",
        "CYP2D6 Poor Metabolizer: codeine cannot be converted to active morphine. "
        "Drug will be ineffective.",
        "Switch to a non-opioid analgesic (e.g., ibuprofen, paracetamol) or a "
        "non-CYP2D6-dependent opioid (e.g., oxycodone)."),
    ("CODEINE", RiskLabel.TOXIC): _g(
        "Contraindicated — use alternative analgesic immediately",
        "CYP2D6 Ultrarapid Metabolizer: rapid conversion to morphine creates risk of "
        "respiratory depression and death at standard doses.",
        "Do not use codeine. Use a non-CYP2D6-dependent analgesic. Monitor for opioid "
        "toxicity signs if already administered."),
    ("CODEINE", RiskLabel.UNKNOWN): UNKNOWN_GUIDANCE,

    # ── WARFARIN (CYP2C9) ───────────────────────────────────────────────────
    # CYP2C9 clears S-warfarin; reduced function raises INR.
    ("WARFARIN", RiskLabel.SAFE): _g(
        "Proceed with standard initiation protocol",
        "CYP2C9 Normal Metabolizer. Use standard warfarin initiation dose per local protocol.",
        "Monitor INR at day 3, day 7, then weekly until stable."),
    ("WARFARIN", RiskLabel.ADJUST_DOSAGE): _g(
        "Reduce initial warfarin dose by 25–50%",
        "Reduced CYP2C9 activity will slow warfarin clearance. Initiate at 25–50% of "
        "standard dose to avoid supratherapeutic INR.",
        "Increase INR monitoring frequency: days 3, 5, 7, 10. Target INR 2.0–3.0."),
    ("WARFARIN", RiskLabel.TOXIC): _g(
        "Significantly reduce dose or consider alternative anticoagulant",
        "CYP2C9 Poor Metabolizer: severely impaired warfarin clearance. Risk of major "
        "bleeding at standard doses. Reduce initial dose by ≥50% or switch to a DOAC.",
        "Daily INR monitoring until stable. Watch for bleeding signs. Consider haematology review."),
    ("WARFARIN", RiskLabel.INEFFECTIVE): _g(
        "Proceed with standard dosing",
        "No evidence of reduced warfarin efficacy from CYP2C9 status alone.",
        "Standard INR monitoring."),
    ("WARFARIN", RiskLabel.UNKNOWN): UNKNOWN_GUIDANCE,

    # ── CLOPIDOGREL (CYP2C19) ───────────────────────────────────────────────
    # Prodrug activated by CYP2C19.
    ("CLOPIDOGREL", RiskLabel.SAFE): _g(
        "Proceed with standard clopidogrel therapy",
        "CYP2C19 Normal/Rapid Metabolizer. Standard clopidogrel dose provides adequate "
        "platelet inhibition.",
        "Routine cardiovascular monitoring per indication."),
    ("CLOPIDOGREL", RiskLabel.ADJUST_DOSAGE): _g(
        "Consider prasugrel or ticagrelor as alternative",
        "Reduced CYP2C19 activity may lead to suboptimal platelet inhibition. Consider "
        "switching to prasugrel or ticagrelor if clinically indicated.",
        "Platelet function testing recommended if clopidogrel is continued."),
    ("CLOPIDOGREL", RiskLabel.INEFFECTIVE): _g(
        "Avoid clopidogrel — use prasugrel or ticagrelor",
        "CYP2C19 Poor Metabolizer: clopidogrel cannot be adequately activated. Risk of "
        "stent thrombosis or adverse cardiovascular events.",
        "Switch to prasugrel 10 mg/day or ticagrelor 90 mg twice daily per cardiology guidance."),
    ("CLOPIDOGREL", RiskLabel.TOXIC): _g(
        "Proceed with standard dosing",
        "No toxicity risk identified from CYP2C19 status for clopidogrel.",
        "Standard monitoring."),
    ("CLOPIDOGREL", RiskLabel.UNKNOWN): UNKNOWN_GUIDANCE,

    # ── SIMVASTATIN (SLCO1B1) ───────────────────────────────────────────────
    # Reduced hepatic uptake raises plasma levels and myopathy risk.
    ("SIMVASTATIN", RiskLabel.SAFE): _g(
        "Proceed with standard simvastatin dosing",
        "SLCO1B1 Normal Function. Standard simvastatin dose is appropriate.",
        "Annual CK monitoring. Report unexplained muscle pain immediately."),
    ("SIMVASTATIN", RiskLabel.ADJUST_DOSAGE): _g(
        "Reduce simvastatin dose or switch statin",
        "Decreased SLCO1B1 function increases simvastatin plasma exposure. Use ≤20 mg/day "
        "or switch to a lower-risk statin (pravastatin, rosuvastatin).",
        "CK levels at baseline and 3 months. Counsel patient on myopathy symptoms."),
    ("SIMVASTATIN", RiskLabel.TOXIC): _g(
        "Avoid simvastatin — switch to pravastatin or rosuvastatin",
        "SLCO1B1 Poor Function: high risk of simvastatin-induced myopathy and "
        "rhabdomyolysis at standard doses.",
        "Switch to pravastatin 40 mg or rosuvastatin 20 mg. Baseline CK. Urgent review "
        "if muscle symptoms develop."),
    ("SIMVASTATIN", RiskLabel.INEFFECTIVE): _g(
        "Proceed with standard dosing",
        "No efficacy concern identified from SLCO1B1 status.",
        "Standard monitoring."),
    ("SIMVASTATIN", RiskLabel.UNKNOWN): UNKNOWN_GUIDANCE,

    # ── AZATHIOPRINE (TPMT) ─────────────────────────────────────────────────
    # TPMT inactivates thiopurines; PM accumulates 6-TGN.
    ("AZATHIOPRINE", RiskLabel.SAFE): _g(
        "Proceed with standard azathioprine dosing",
        "TPMT Normal Metabolizer. Standard dose is appropriate.",
        "CBC monthly for 3 months, then every 3 months. LFTs at baseline."),
    ("AZATHIOPRINE", RiskLabel.ADJUST_DOSAGE): _g(
        "Reduce azathioprine dose by 30–70%",
        "Reduced TPMT activity increases thiopurine metabolite accumulation. Reduce dose "
        "by 30–70% and titrate to clinical response.",
        "CBC weekly for first 4 weeks, then monthly. Monitor for leukopenia."),
    ("AZATHIOPRINE", RiskLabel.TOXIC): _g(
        "Contraindicated — use alternative immunosuppressant",
        "TPMT Poor Metabolizer: azathioprine at any standard dose will cause "
        "life-threatening myelosuppression.",
        "Do not use azathioprine. Consider mycophenolate mofetil or another non-thiopurine "
        "agent. Haematology review required."),
    ("AZATHIOPRINE", RiskLabel.INEFFECTIVE): _g(
        "Proceed with standard dosing",
        "No efficacy concern from TPMT status alone.",
        "Standard CBC monitoring."),
    ("AZATHIOPRINE", RiskLabel.UNKNOWN): UNKNOWN_GUIDANCE,

    # ── FLUOROURACIL (DPYD) ─────────────────────────────────────────────────
    # DPYD catabolises 5-FU.
    ("FLUOROURACIL", RiskLabel.SAFE): _g(
        "Proceed with standard 5-FU dosing",
        "DPYD Normal Metabolizer. Standard 5-FU dose and schedule are appropriate.",
        "Standard oncology monitoring: CBC, mucositis assessment, hand-foot syndrome review."),
    ("FLUOROURACIL", RiskLabel.ADJUST_DOSAGE): _g(
        "Reduce 5-FU starting dose by 25–50%",
        "Reduced DPYD activity will impair 5-FU clearance. Reduce starting dose by 25–50% "
        "and escalate only if tolerated.",
        "Close toxicity monitoring: CBC weekly, mucositis, diarrhoea, and neurotoxicity "
        "assessment each cycle."),
    ("FLUOROURACIL", RiskLabel.TOXIC): _g(
        "Contraindicated at standard dose — oncology review required",
        "DPYD Poor Metabolizer: 5-FU cannot be adequately cleared. Standard doses will "
        "cause severe or fatal toxicity (mucositis, neutropenia, neurotoxicity).",
        "Do not administer standard 5-FU. Consider capecitabine dose reduction per DPYD "
        "guidelines or switch to an alternative regimen. Urgent oncology and clinical "
        "pharmacology review."),
    ("FLUOROURACIL", RiskLabel.INEFFECTIVE): _g(
        "Proceed with standard dosing",
        "No efficacy concern from DPYD status alone.",
        "Standard oncology monitoring."),
    ("FLUOROURACIL", RiskLabel.UNKNOWN): UNKNOWN_GUIDANCE,
})


def get_recommendation(
    drug: Optional[str], risk_label: Optional[Union[RiskLabel, str]]
) -> ClinicalGuidance:
    """Guidance for a drug and risk label. Never returns None."""
    if drug is None or risk_label is None:
        return UNKNOWN_GUIDANCE
    try:
        label = RiskLabel(risk_label)
    except ValueError:
        return UNKNOWN_GUIDANCE
    return GUIDANCE_TABLE.get((drug.upper(), label), UNKNOWN_GUIDANCE)
