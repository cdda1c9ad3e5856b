"""
This module holds the session and view state of the PCOS Guard application.

`SessionController` owns everything one browser session needs: the signed-in user,
the active view, the user's results, the result being displayed, the questionnaire
being filled in, the busy flag used while an assessment is running, and the last
error to show. It coordinates the
`RecordStore` and the `RiskAssessmentClient`; the GUI only reads this state and calls
its methods.
"""
# pcosguard/modules/controller.py

from urllib.parse import quote
from modules.gemini import AnalysisError
from modules.intake import apply_change, default_inputs
from modules.models import User

LANDING = "landing"
SIGNUP = "signup"
HOME = "home"
TEST = "test"
RESULTS = "results"
HISTORY = "history"

VIEWS = (LANDING, SIGNUP, HOME, TEST, RESULTS, HISTORY)
# Views reachable through the sidebar once signed in.
APP_VIEWS = (HOME, TEST, RESULTS, HISTORY)

ANALYSIS_ERROR_MESSAGE = "Error analyzing clinical data. Please check your inputs."

DOCTOR_SEARCH_URL = 'https://www.practo.com/search/doctors?q=[{{"word":"{specialty}"}}]'
AWARENESS_URL = "https://www.pcoschallenge.org"


def consult_doctor_url(specialty: str) -> str:
    """Returns the doctor-search link for a medical specialty."""
    return DOCTOR_SEARCH_URL.format(specialty=quote(specialty))


class SessionController:
    """Manages the state machine for one user session."""
    def __init__(self, store, client):
        """Initializes an unauthenticated session on the landing view.

        Args:
            store (RecordStore): The persistence layer.
            client (RiskAssessmentClient): The assessment client.
        """
        self.store = store
        self.client = client
        self.user = None
        self.view = LANDING
        self.assessments = []
        self.current_result = None
        self.intake = None
        self.is_loading = False
        self.error = None

    def restore(self):
        """Reloads the session user and their results from the store."""
        user = self.store.get_current_user()
        if user:
            self.user = user
            self.assessments = self.store.get_user_assessments(user.id)
            self.view = HOME
        else:
            self.user = None
            self.assessments = []
            self.view = LANDING
        self.current_result = None
        return self.user

    def go_to_signup(self):
        self.view = SIGNUP

    def go_to_landing(self):
        if not self.user:
            self.view = LANDING

    def sign_up(self, name: str, email: str) -> User:
        """Creates a user, makes them the session user and opens the dashboard.

        Returns:
            User: The newly created user.
        """
        user = User(name=name, email=email)
        self.store.save_user(user)
        self.store.set_current_user(user)
        self.user = user
        self.assessments = self.store.get_user_assessments(user.id)
        self.current_result = None
        self.error = None
        self.view = HOME
        return user

    def _enter_test(self):
        # A fresh questionnaire each time the test view is opened from elsewhere.
        if self.view != TEST or self.intake is None:
            self.intake = default_inputs()
        self.view = TEST

    def start_test(self):
        if not self.user:
            return
        self.error = None
        self._enter_test()

    def update_intake(self, field: str, raw):
        """Folds one edited questionnaire value into `intake`, keeping BMI in sync."""
        if self.intake is None:
            self.intake = default_inputs()
        self.intake = apply_change(self.intake, field, raw)
        return self.intake

    def run_test(self, inputs):
        """Submits a questionnaire for assessment.

        On success the result is stored, put at the front of the loaded results and
        displayed. If the analysis fails or the result cannot be written, nothing is
        added to the loaded results, `error` is set and the view stays on the test.
        Does nothing when no user is signed in.

        Args:
            inputs (AssessmentInputs): The completed questionnaire.

        Returns:
            AssessmentResult or None: The new result, or None if nothing was produced.
        """
        if not self.user:
            return None
        self.is_loading = True
        self.error = None
        try:
            result = self.client.analyze(self.user.id, inputs)
            self.store.save_assessment(result)
            self.assessments = [result] + self.assessments
            self.current_result = result
            self.view = RESULTS
            return result
        except (AnalysisError, OSError) as e:
            print(f"Warning: assessment not completed: {e!r}")
            self.error = ANALYSIS_ERROR_MESSAGE
            self.view = TEST
            return None
        finally:
            self.is_loading = False

    def navigate(self, view: str):
        """Switches between the signed-in views using data already in memory.

        Unknown views, and the results view when no result is selected, are ignored.
        """
        if not self.user or view not in APP_VIEWS:
            return
        if view == RESULTS and self.current_result is None:
            return
        if view == TEST:
            self._enter_test()
            return
        self.error = None
        self.view = view

    def show_result(self, result):
        if not self.user or result is None:
            return
        self.current_result = result
        self.view = RESULTS

    def recent_assessments(self, limit=3) -> list:
        return self.assessments[:limit]

    def logout(self):
        """Ends the session. Stored users and results are kept."""
        self.store.set_current_user(None)
        self.user = None
        self.assessments = []
        self.current_result = None
        self.intake = None
        self.is_loading = False
        self.error = None
        self.view = LANDING
