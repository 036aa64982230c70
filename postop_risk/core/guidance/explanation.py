"""
Natural-language explanation of a risk assessment.

Two registers: a detailed clinician-facing text and a simplified
patient-facing paragraph. The wording is user-facing and fixed; keep the
numbering and percentage formatting exactly as they are.
"""
from __future__ import annotations

from postop_risk.core.scoring.base import RiskAssessment, RiskCategory

EXPLAINED_FACTOR_LIMIT = 3

_SIMPLIFIED_RISK_TEXT = {
    RiskCategory.HIGH: "higher than normal",
    RiskCategory.MEDIUM: "moderate",
    RiskCategory.LOW: "relatively low",
}

_DETAILED_CLOSING = {
    RiskCategory.HIGH: "Immediate clinical attention and enhanced monitoring protocols are strongly recommended.",
    RiskCategory.MEDIUM: (
        "Vigilant observation with scheduled follow-ups is advised to monitor for early "
        "complication indicators."
    ),
    RiskCategory.LOW: "Standard post-operative care protocols are appropriate for this risk profile.",
}


def explain(risk: RiskAssessment, simplified: bool = False) -> str:
    if simplified:
        return _simplified(risk)
    return _detailed(risk)


def _simplified(risk: RiskAssessment) -> str:
    risk_text = _SIMPLIFIED_RISK_TEXT[risk.risk_category]
    main_factors = ", ".join(
        f.label.lower() for f in risk.top_risk_factors[:EXPLAINED_FACTOR_LIMIT]
    )
    closing = (
        "Close monitoring and preventive measures are recommended."
        if risk.risk_category == RiskCategory.HIGH
        else "Standard follow-up care is advised."
    )

    text = (
        f"This patient has a {risk_text} chance of developing complications after surgery. "
        f"The main concerns are: {main_factors}. {closing}"
    )
    if risk.explanation_notes:
        text += "\n\n" + " ".join(risk.explanation_notes)
    return text


def _detailed(risk: RiskAssessment) -> str:
    text = (
        "Based on multimodal analysis integrating clinical parameters, behavioral risk factors, "
        f"and visual assessment data, this patient demonstrates a {risk.risk_category.value}-risk "
        f"profile with an aggregate complication probability of {risk.overall_risk_score}%.\n\n"
    )

    text += "Primary Risk Contributors:\n"
    for index, factor in enumerate(risk.top_risk_factors[:EXPLAINED_FACTOR_LIMIT], start=1):
        text += f"{index}. {factor.label} ({factor.contribution:.1f}% contribution)\n"

    text += (
        "\nThe predictive model incorporates weighted contributions from clinical history "
        f"({risk.clinical_contribution}%), behavioral factors ({risk.behavioral_contribution}%), "
        f"and media-derived indicators ({risk.media_contribution}%). "
    )
    text += _DETAILED_CLOSING[risk.risk_category]

    if risk.explanation_notes:
        text += "\n\n" + "\n".join(risk.explanation_notes)
    return text
