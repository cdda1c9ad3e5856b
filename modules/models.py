"""
This module defines the primary data models for the PCOS Guard application.

These classes are used to structure the data that is managed by the `RecordStore`
and produced by the risk assessment client. Each model knows how to turn itself
into the plain dictionary that is persisted (using the camelCase keys of the
assessment schema) and how to rebuild itself from such a dictionary.
"""
# pcosguard/modules/models.py

from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from urllib.parse import quote
import time
import uuid

AVATAR_URL = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


def generate_id(prefix: str) -> str:
    """Builds a time-derived identifier that stays unique within a process run.

    Args:
        prefix (str): A short tag such as 'u' or 'rpt'.

    Returns:
        str: An identifier like 'rpt_1718000000000_3fa2b1c4'.
    """
    return f"{prefix}_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def avatar_for(name: str) -> str:
    """Returns the avatar URL for a display name. The same name always gives the same URL."""
    return AVATAR_URL.format(seed=quote(name or ""))


def round_half_up(value, places=2) -> Decimal:
    """Rounds the exact binary value of a float to `places` decimals, ties away from zero.

    This matches how browsers format numbers with `toFixed`, e.g. 2.125 -> 2.13
    where Python's `round` would give 2.12.
    """
    return Decimal(float(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def yes_no(flag, yes="Yes", no="No") -> str:
    return yes if flag else no


class RiskLevel(str, Enum):
    """The three risk classes an assessment can be assigned."""
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"


class User:
    """Represents a person who signed up on this device.

    Attributes:
        id (str): A unique identifier generated at signup.
        name (str): The display name.
        email (str): The contact email.
        avatar (str): An avatar URL derived from the name.
    """
    def __init__(self, name, email, user_id=None, avatar=None):
        self.id = user_id or generate_id("u")
        self.name = name
        self.email = email
        self.avatar = avatar or avatar_for(name)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email, "avatar": self.avatar}

    @classmethod
    def from_dict(cls, data: dict) -> "User":
        return cls(
            name=data["name"],
            email=data.get("email", ""),
            user_id=data["id"],
            avatar=data.get("avatar"),
        )


# Persisted key for each AssessmentInputs attribute, in questionnaire order.
INPUT_FIELDS = {
    "age": "age",
    "weight": "weight",
    "height": "height",
    "bmi": "bmi",
    "blood_group": "bloodGroup",
    "pulse_rate": "pulseRate",
    "cycle_length": "cycleLength",
    "cycle_status": "cycleStatus",
    "pregnant": "pregnant",
    "weight_gain": "weightGain",
    "hair_growth": "hairGrowth",
    "skin_darkening": "skinDarkening",
    "hair_loss": "hairLoss",
    "pimples": "pimples",
    "fast_food": "fastFood",
    "exercise": "exercise",
    "waist_hip_ratio": "waistHipRatio",
    "fsh": "fsh",
    "lh": "lh",
    "tsh": "tsh",
    "amh": "amh",
    "prolactin": "prolactin",
    "vitamin_d3": "vitaminD3",
}

NUMERIC_FIELDS = (
    "age", "weight", "height", "bmi", "pulse_rate", "cycle_length", "waist_hip_ratio",
    "fsh", "lh", "tsh", "amh", "prolactin", "vitamin_d3",
)
BOOLEAN_FIELDS = (
    "pregnant", "weight_gain", "hair_growth", "skin_darkening",
    "hair_loss", "pimples", "fast_food", "exercise",
)
CATEGORICAL_FIELDS = ("blood_group", "cycle_status")

BLOOD_GROUPS = ["A+", "A-", "B+", "B-", "O+", "O-", "AB+", "AB-"]
CYCLE_STATUSES = ["Regular", "Irregular"]


class AssessmentInputs:
    """The clinical questionnaire snapshot submitted for one test.

    The defaults are the values the intake form starts with. `bmi` is a derived
    field; use `modules.intake.apply_change` to edit weight or height so that it
    stays in sync.
    """
    def __init__(self, age=24, weight=65, height=165, bmi=23.88, blood_group="O+",
                 pulse_rate=72, cycle_length=30, cycle_status="Regular", pregnant=False,
                 weight_gain=True, hair_growth=False, skin_darkening=False, hair_loss=False,
                 pimples=True, fast_food=True, exercise=False, waist_hip_ratio=0.8,
                 fsh=4.8, lh=10.2, tsh=2.1, amh=3.5, prolactin=15.0, vitamin_d3=20.0):
        self.age = age
        self.weight = weight
        self.height = height
        self.bmi = bmi
        self.blood_group = blood_group
        self.pulse_rate = pulse_rate
        self.cycle_length = cycle_length
        self.cycle_status = cycle_status
        self.pregnant = pregnant
        self.weight_gain = weight_gain
        self.hair_growth = hair_growth
        self.skin_darkening = skin_darkening
        self.hair_loss = hair_loss
        self.pimples = pimples
        self.fast_food = fast_food
        self.exercise = exercise
        self.waist_hip_ratio = waist_hip_ratio
        self.fsh = fsh
        self.lh = lh
        self.tsh = tsh
        self.amh = amh
        self.prolactin = prolactin
        self.vitamin_d3 = vitamin_d3

    def to_dict(self) -> dict:
        return {key: getattr(self, attr) for attr, key in INPUT_FIELDS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> "AssessmentInputs":
        # Missing keys fall back to the form defaults.
        values = {attr: data[key] for attr, key in INPUT_FIELDS.items() if key in data}
        return cls(**values)

    def copy(self, **changes) -> "AssessmentInputs":
        """Returns a new snapshot with the given attributes replaced."""
        values = dict(self.__dict__)
        values.update(changes)
        return AssessmentInputs(**values)


class AssessmentResult:
    """Represents one stored assessment outcome.

    Attributes:
        id (str): A unique, time-derived identifier.
        user_id (str): The ID of the user who ran the test.
        timestamp (int): Creation time in epoch milliseconds.
        inputs (AssessmentInputs): The questionnaire that produced this result.
        risk_level (RiskLevel): LOW, MODERATE or HIGH.
        confidence (float): The oracle's confidence, expected in [0, 1].
        summary (str): A free-text summary of findings.
        recommendations (list): Ordered recommendation strings.
    """
    def __init__(self, user_id, inputs, risk_level, confidence, summary, recommendations, result_id=None, timestamp=None):
        self.id = result_id or generate_id("rpt")
        self.user_id = user_id
        self.timestamp = timestamp if timestamp is not None else int(time.time() * 1000)
        self.inputs = inputs
        self.risk_level = RiskLevel(risk_level)
        self.confidence = confidence
        self.summary = summary
        self.recommendations = list(recommendations)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "timestamp": self.timestamp,
            "inputs": self.inputs.to_dict(),
            "riskLevel": self.risk_level.value,
            "confidence": self.confidence,
            "summary": self.summary,
            "recommendations": list(self.recommendations),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AssessmentResult":
        return cls(
            user_id=data["userId"],
            inputs=AssessmentInputs.from_dict(data.get("inputs") or {}),
            risk_level=data["riskLevel"],
            confidence=data["confidence"],
            summary=data.get("summary", ""),
            recommendations=data.get("recommendations", []),
            result_id=data["id"],
            timestamp=data.get("timestamp"),
        )
