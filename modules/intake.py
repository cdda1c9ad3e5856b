"""
Intake form logic: default values, type coercion and the derived BMI field.

The GUI routes each questionnaire widget through `apply_change`, so BMI is recomputed
immediately whenever weight or height is edited. No bounds are enforced here;
whatever the user types is passed on unchanged.
"""
# pcosguard/modules/intake.py

from modules.models import AssessmentInputs, NUMERIC_FIELDS, BOOLEAN_FIELDS, INPUT_FIELDS, round_half_up


def default_inputs() -> AssessmentInputs:
    """Returns the questionnaire pre-filled with the form defaults."""
    return AssessmentInputs()


def compute_bmi(weight, height_cm) -> float:
    """Computes BMI from weight in kg and height in cm, rounded half-up to 2 decimals.

    Returns 0 when the height is not positive.
    """
    height_m = float(height_cm) / 100
    if height_m <= 0:
        return 0
    return float(round_half_up(float(weight) / (height_m * height_m)))


def coerce_value(field: str, raw):
    """Converts a raw widget value to the type of the given field.

    Raises:
        KeyError: If `field` is not a questionnaire field.
        ValueError: If a numeric field receives something that is not a number.
    """
    if field not in INPUT_FIELDS:
        raise KeyError(field)
    if field in NUMERIC_FIELDS:
        return float(raw)
    if field in BOOLEAN_FIELDS:
        return bool(raw)
    return str(raw)


def apply_change(inputs: AssessmentInputs, field: str, raw) -> AssessmentInputs:
    """Returns a new snapshot with one field changed.

    Editing `weight` or `height` also recomputes `bmi` using the current value of
    the other dimension. `bmi` itself cannot be edited directly.
    """
    if field == "bmi":
        return inputs.copy()
    value = coerce_value(field, raw)
    updated = inputs.copy(**{field: value})
    if field in ("weight", "height"):
        updated.bmi = compute_bmi(updated.weight, updated.height)
    return updated
