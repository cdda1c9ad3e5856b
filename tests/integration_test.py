"""
Integration tests for the PCOS Guard application.

These tests verify the interactions between the `SessionController`, the
`RiskAssessmentClient` and the `RecordStore`, following one user workflow at a time.
They are more focused than system tests but broader than unit tests.
"""
from conftest import FailingOracle, StubOracle
from modules import controller as ctl
from modules.controller import SessionController
from modules.gemini import RiskAssessmentClient
from modules.intake import apply_change, default_inputs
from modules.storage import RecordStore


def test_signup_test_and_results_workflow(controller, store, stub_oracle):
    """
    Tests the workflow from signup to a stored, displayed assessment.
    """
    controller.go_to_signup()
    user = controller.sign_up("Priya", "priya@example.com")
    controller.start_test()
    assert controller.view == ctl.TEST

    inputs = apply_change(default_inputs(), "height", 175)
    inputs = apply_change(inputs, "weight", 70)
    result = controller.run_test(inputs)

    assert controller.view == ctl.RESULTS
    assert stub_oracle.calls[0][0] == user.id
    assert stub_oracle.calls[0][1].bmi == 22.86
    stored = store.get_user_assessments(user.id)
    assert [r.id for r in stored] == [result.id]
    assert stored[0].inputs.bmi == 22.86
    assert stored[0].to_dict() == result.to_dict()


def test_failed_then_successful_assessment(controller, store):
    """
    Tests that a failed call leaves no trace and a retry by the user then succeeds.
    """
    controller.sign_up("Lena", "lena@example.com")
    controller.client = RiskAssessmentClient(oracle=FailingOracle())
    controller.start_test()
    assert controller.run_test(default_inputs()) is None
    assert controller.view == ctl.TEST
    assert controller.is_loading is False
    assert store.get_assessments() == []

    controller.client = RiskAssessmentClient(oracle=StubOracle())
    result = controller.run_test(default_inputs())
    assert result is not None
    assert controller.error is None
    assert controller.view == ctl.RESULTS
    assert [r.id for r in store.get_assessments()] == [result.id]


def test_in_memory_results_match_store_after_several_tests(signed_in_controller, store):
    for _ in range(3):
        signed_in_controller.run_test(default_inputs())
    in_memory = [r.id for r in signed_in_controller.assessments]
    persisted = [r.id for r in store.get_user_assessments(signed_in_controller.user.id)]
    assert in_memory == persisted


def test_results_are_isolated_between_users(store, client):
    """
    Tests that two users sharing a store only ever see their own reports.
    """
    first = SessionController(store, client)
    first.sign_up("User A", "a@example.com")
    result_a = first.run_test(default_inputs())
    first.logout()

    second = SessionController(store, client)
    second.sign_up("User B", "b@example.com")
    result_b = second.run_test(default_inputs())

    assert [r.id for r in store.get_user_assessments(first.store.get_users()[0].id)] == [result_a.id]
    assert [r.id for r in second.assessments] == [result_b.id]
    assert [r.id for r in store.get_assessments()] == [result_b.id, result_a.id]


def test_session_persists_across_store_instances(signed_in_controller, data_dir, dummy_encryptor, client):
    """
    Tests that a new store on the same files sees the same session and results.
    """
    result = signed_in_controller.run_test(default_inputs())

    reloaded_store = RecordStore(data_dir=data_dir, encryptor=dummy_encryptor)
    restored = SessionController(reloaded_store, client)
    restored.restore()
    assert restored.view == ctl.HOME
    assert restored.user.__dict__ == signed_in_controller.user.__dict__
    assert [r.id for r in restored.assessments] == [result.id]
