"""
Pytest configuration file for the PCOS Guard test suite.

This file defines shared fixtures used across the test files. It includes logic to:
- Give every test its own temporary data directory and its own Fernet key, so tests never
  touch the production records or the production `secret.key`.
- Replace the Gemini oracle with a deterministic stub, so no test needs network access
  or an API key.
- Build isolated `RecordStore`, `RiskAssessmentClient` and `SessionController` instances.
"""
import pytest
from cryptography.fernet import Fernet

from modules import storage as storage_module
from modules.controller import SessionController
from modules.gemini import RiskAssessmentClient
from modules.models import AssessmentInputs, AssessmentResult


STUB_ANALYSIS = {
    "riskLevel": "HIGH",
    "confidence": 0.87,
    "summary": "Elevated LH/FSH ratio with irregular cycle markers.",
    "recommendations": [
        "Consult a gynecologist for a pelvic ultrasound.",
        "Repeat hormone panel in early follicular phase.",
        "Adopt a low-glycemic diet.",
        "Aim for 150 minutes of exercise per week.",
    ],
}


class StubOracle:
    """An oracle that records its calls and returns a fixed analysis."""

    def __init__(self, analysis=None):
        self.analysis = dict(STUB_ANALYSIS if analysis is None else analysis)
        self.calls = []

    def assess(self, user_id, inputs):
        self.calls.append((user_id, inputs))
        return dict(self.analysis)


class FailingOracle:
    """An oracle whose transport always fails."""

    def __init__(self, exc=None):
        self.exc = exc or ConnectionError("service unavailable")
        self.calls = 0

    def assess(self, user_id, inputs):
        self.calls += 1
        raise self.exc


def make_result(user_id, risk_level="LOW", **extra):
    """Builds an `AssessmentResult` with default inputs for storage tests."""
    return AssessmentResult(
        user_id=user_id,
        inputs=AssessmentInputs(),
        risk_level=risk_level,
        confidence=extra.pop("confidence", 0.5),
        summary=extra.pop("summary", f"{risk_level} summary"),
        recommendations=extra.pop("recommendations", ["Stay active."]),
        **extra,
    )


@pytest.fixture
def dummy_encryptor():
    """Provides a Fernet instance with a throwaway key."""
    return Fernet(Fernet.generate_key())


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    directory = tmp_path / "records"
    monkeypatch.setattr(storage_module, "DATA_DIR", str(directory), raising=False)
    return directory


@pytest.fixture
def store(data_dir, dummy_encryptor):
    """Provides an empty `RecordStore` writing to a temporary directory."""
    return storage_module.RecordStore(data_dir=data_dir, encryptor=dummy_encryptor)


@pytest.fixture
def stub_oracle():
    return StubOracle()


@pytest.fixture
def client(stub_oracle):
    return RiskAssessmentClient(oracle=stub_oracle)


@pytest.fixture
def controller(store, client):
    """Provides a freshly restored controller on the landing view."""
    ctrl = SessionController(store, client)
    ctrl.restore()
    return ctrl


@pytest.fixture
def signed_in_controller(controller):
    """Provides a controller with a signed-up user on the dashboard."""
    controller.sign_up("Asha Rao", "asha@example.com")
    return controller
