"""
This module provides the risk assessment client and its interface to the Google Gemini model.

It is responsible for:
- Deriving the LH/FSH ratio and building the prompt that embeds the full questionnaire.
- Configuring the Gemini API with the credential from Streamlit secrets (on first use).
- Asking the model, through a system instruction and a JSON response schema, to act as a
  surrogate for a calibrated Random Forest PCOS classifier.
- Checking that the reply matches the schema and turning it into an `AssessmentResult`.

The classification itself is entirely the model's. The oracle is pluggable: any object with
an `assess(user_id, inputs)` method returning the analysis mapping can stand in for Gemini,
which is how the tests provide deterministic answers.
"""
# pcosguard/modules/gemini.py

import json
import numbers
import streamlit as st
import google.generativeai as genai
from modules.models import AssessmentResult, RiskLevel, round_half_up, yes_no

MODEL_NAME = "gemini-2.5-pro"

SYSTEM_INSTRUCTION = """
You are a specialized Medical AI Surrogate for a Random Forest Classifier trained on PCOS datasets.
Your task is to analyze patient features and provide a risk assessment as if you were the model
(n_estimators=300, max_depth=6, calibrated with isotonic regression).

Key indicators the model prioritizes:
1. LH/FSH Ratio: Ratios > 2.0 are high-risk indicators.
2. AMH: Levels > 4.5 ng/mL are significant for polycystic morphology.
3. BMI & Weight Gain: Metabolic markers.
4. Cycle Regularity: Clinical foundation for diagnosis.
5. Skin & Hair: Androgen excess markers (Hirsutism, Acne).
"""

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "riskLevel": {"type": "STRING", "enum": [level.value for level in RiskLevel]},
        "confidence": {"type": "NUMBER"},
        "summary": {"type": "STRING"},
        "recommendations": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": ["riskLevel", "confidence", "summary", "recommendations"],
}

REQUIRED_KEYS = ("riskLevel", "confidence", "summary", "recommendations")


class AnalysisError(Exception):
    """Raised when an assessment could not be produced, whatever the cause."""


def compute_lh_fsh_ratio(fsh, lh) -> str:
    """Returns LH/FSH rounded half-up to two decimals, or 'N/A' when FSH is not positive."""
    if fsh > 0:
        return str(round_half_up(lh / fsh))
    return "N/A"


def build_prompt(user_id: str, inputs) -> str:
    """Builds the prediction request embedding every questionnaire field.

    Args:
        user_id (str): The ID of the patient running the test.
        inputs (AssessmentInputs): The questionnaire snapshot.

    Returns:
        str: The prompt text sent alongside `SYSTEM_INSTRUCTION`.
    """
    ratio = compute_lh_fsh_ratio(inputs.fsh, inputs.lh)
    return f"""
    Perform a diagnostic prediction for Patient ID: {user_id}.

    Input Vector:
    - Age: {inputs.age}
    - BMI: {inputs.bmi} (derived from {inputs.weight}kg, {inputs.height}cm)
    - Blood Group: {inputs.blood_group}
    - Pulse Rate: {inputs.pulse_rate} bpm
    - Waist:Hip Ratio: {inputs.waist_hip_ratio}
    - Pregnant: {yes_no(inputs.pregnant)}
    - FSH: {inputs.fsh} mIU/mL, LH: {inputs.lh} mIU/mL (Ratio: {ratio})
    - AMH: {inputs.amh} ng/mL
    - TSH: {inputs.tsh} mIU/L
    - Prolactin: {inputs.prolactin} ng/mL
    - Vitamin D3: {inputs.vitamin_d3} ng/mL
    - Cycle: {inputs.cycle_status} (Length: {inputs.cycle_length} days)
    - Weight Gain: {yes_no(inputs.weight_gain)}
    - Hirsutism: {yes_no(inputs.hair_growth)}
    - Hair Loss: {yes_no(inputs.hair_loss)}
    - Acne: {yes_no(inputs.pimples)}
    - Darkening: {yes_no(inputs.skin_darkening)}
    - Diet: {yes_no(inputs.fast_food, 'Frequent Fast Food', 'Healthy')}
    - Exercise: {yes_no(inputs.exercise, 'Regular', 'No')}

    Return the result in JSON format with riskLevel (LOW, MODERATE, HIGH), confidence (0-1),
    a summary of findings, and a list of 4-5 actionable medical or lifestyle recommendations.
    """


def parse_analysis(raw) -> dict:
    """Checks an oracle reply against the response schema.

    Only the shape is checked: values are not range-checked or cross-validated.

    Args:
        raw (str or dict): JSON text or an already decoded mapping.

    Returns:
        dict: The four analysis fields.

    Raises:
        ValueError: If the reply is not valid JSON or does not match the schema.
    """
    data = json.loads(raw) if isinstance(raw, (str, bytes)) else raw
    if not isinstance(data, dict):
        raise ValueError("analysis is not a JSON object")
    missing = [key for key in REQUIRED_KEYS if key not in data]
    if missing:
        raise ValueError(f"analysis is missing {', '.join(missing)}")

    risk_level = data["riskLevel"]
    if risk_level not in {level.value for level in RiskLevel}:
        raise ValueError(f"unknown riskLevel {risk_level!r}")
    confidence = data["confidence"]
    if isinstance(confidence, bool) or not isinstance(confidence, numbers.Real):
        raise ValueError("confidence is not a number")
    if not isinstance(data["summary"], str):
        raise ValueError("summary is not a string")
    recommendations = data["recommendations"]
    if not isinstance(recommendations, list) or not all(isinstance(r, str) for r in recommendations):
        raise ValueError("recommendations is not a list of strings")

    return {
        "riskLevel": risk_level,
        "confidence": confidence,
        "summary": data["summary"],
        "recommendations": recommendations,
    }


class GeminiOracle:
    """Asks a Gemini model for the assessment. The model is configured lazily."""
    def __init__(self, model=None):
        self._model = model

    @property
    def model(self):
        if self._model is None:
            genai.configure(api_key=st.secrets["GEMINI_API_KEY"])
            self._model = genai.GenerativeModel(
                MODEL_NAME,
                system_instruction=SYSTEM_INSTRUCTION,
                generation_config=genai.GenerationConfig(
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                ),
            )
        return self._model

    def assess(self, user_id: str, inputs) -> dict:
        response = self.model.generate_content(build_prompt(user_id, inputs))
        return parse_analysis(response.text)


class RiskAssessmentClient:
    """Turns one questionnaire into one `AssessmentResult` by consulting the oracle."""
    def __init__(self, oracle=None):
        self.oracle = oracle or GeminiOracle()

    def analyze(self, user_id: str, inputs) -> AssessmentResult:
        """Runs a single assessment.

        Args:
            user_id (str): The ID of the patient.
            inputs (AssessmentInputs): The questionnaire snapshot, passed on unvalidated.

        Returns:
            AssessmentResult: A new result carrying the oracle's values verbatim.

        Raises:
            AnalysisError: On any transport, parsing or schema failure. Nothing is retried.
        """
        try:
            analysis = parse_analysis(self.oracle.assess(user_id, inputs))
        except Exception as e:
            print(f"Error generating assessment from Gemini API: {e!r}")
            raise AnalysisError("analysis failed") from e

        return AssessmentResult(
            user_id=user_id,
            inputs=inputs.copy(),
            risk_level=analysis["riskLevel"],
            confidence=analysis["confidence"],
            summary=analysis["summary"],
            recommendations=analysis["recommendations"],
        )
