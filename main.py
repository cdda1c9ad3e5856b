"""
This is the main entry point for the PCOS Guard Streamlit application.

This script handles the following key responsibilities:
- Sets the overall page configuration for the Streamlit app.
- Creates the shared `RecordStore` and the Gemini-backed assessment client once per process.
- Keeps one `SessionController` per browser session, restoring the saved session user on start.
- Routes the visitor to the landing page, the signup form, or the signed-in app based on
  the controller's current view.

Run with: streamlit run main.py
"""
# pcosguard/main.py

import streamlit as st
from modules.controller import SessionController, LANDING, SIGNUP
from modules.gemini import RiskAssessmentClient
from modules.storage import RecordStore
import gui

# Set the basic configuration for the Streamlit page.
st.set_page_config(
    page_title="PCOS Guard",
    layout="wide"
)

@st.cache_resource
def get_record_store():
    """
    Initializes and returns the shared RecordStore instance.

    Decorated with `@st.cache_resource` so every session reads and writes the
    same record files through one object.
    """
    return RecordStore()

@st.cache_resource
def get_assessment_client():
    """Initializes and returns the shared RiskAssessmentClient."""
    return RiskAssessmentClient()

# Session State Management
if 'controller' not in st.session_state:
    controller = SessionController(get_record_store(), get_assessment_client())
    controller.restore()
    st.session_state.controller = controller

controller = st.session_state.controller

# Main App Router
if controller.user:
    gui.show_main_app(controller)
elif controller.view == SIGNUP:
    gui.show_signup_form(controller)
else:
    controller.view = LANDING
    gui.show_landing_page(controller)
