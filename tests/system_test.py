"""
System-level tests for the PCOS Guard application.

These tests simulate complete sessions, including process restarts, and verify the
state of the records on disk after each step to ensure data integrity and correct
application flow.
"""
from conftest import FailingOracle
from modules import controller as ctl
from modules import storage as storage_module
from modules.controller import SessionController
from modules.gemini import RiskAssessmentClient
from modules.intake import default_inputs


def _restart(data_dir, encryptor, client):
    """Simulates a fresh process: new store, new controller, restored session."""
    store = storage_module.RecordStore(data_dir=data_dir, encryptor=encryptor)
    controller = SessionController(store, client)
    controller.restore()
    return controller


def test_end_to_end_session_with_restarts(data_dir, dummy_encryptor, client):
    """
    Tests signup, two assessments, a failure, restart, history, logout and restart again.
    """
    controller = _restart(data_dir, dummy_encryptor, client)
    assert controller.view == ctl.LANDING

    controller.go_to_signup()
    user = controller.sign_up("Fatima", "fatima@example.com")
    first = controller.run_test(default_inputs())
    second = controller.run_test(default_inputs())

    failing = RiskAssessmentClient(oracle=FailingOracle())
    controller.client = failing
    controller.start_test()
    assert controller.run_test(default_inputs()) is None
    assert controller.view == ctl.TEST

    controller = _restart(data_dir, dummy_encryptor, client)
    assert controller.view == ctl.HOME
    assert controller.user.__dict__ == user.__dict__
    assert [r.id for r in controller.assessments] == [second.id, first.id]

    controller.navigate(ctl.HISTORY)
    controller.show_result(controller.assessments[1])
    assert controller.current_result.id == first.id

    controller.logout()
    controller = _restart(data_dir, dummy_encryptor, client)
    assert controller.view == ctl.LANDING
    assert controller.user is None
    assert [u.id for u in controller.store.get_users()] == [user.id]
    assert len(controller.store.get_assessments()) == 2


def test_startup_survives_corrupt_records(data_dir, dummy_encryptor, client):
    """
    Tests that unreadable records never prevent the application from starting.
    """
    data_dir.mkdir(parents=True, exist_ok=True)
    for key in (storage_module.USERS_KEY, storage_module.CURRENT_USER_KEY, storage_module.RESULTS_KEY):
        (data_dir / f"{key}.json").write_text("garbage")

    controller = _restart(data_dir, dummy_encryptor, client)
    assert controller.view == ctl.LANDING

    controller.sign_up("New", "new@example.com")
    controller.run_test(default_inputs())
    controller = _restart(data_dir, dummy_encryptor, client)
    assert controller.view == ctl.HOME
    assert len(controller.assessments) == 1


def test_records_written_with_other_key_are_discarded(data_dir, dummy_encryptor, client):
    """
    Tests that records encrypted with a lost key are treated as empty.
    """
    from cryptography.fernet import Fernet

    controller = _restart(data_dir, Fernet(Fernet.generate_key()), client)
    controller.sign_up("Old Key", "old@example.com")

    controller = _restart(data_dir, dummy_encryptor, client)
    assert controller.view == ctl.LANDING
    assert controller.store.get_users() == []
