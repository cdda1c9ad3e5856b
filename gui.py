"""
This module defines the graphical user interface (GUI) for the PCOS Guard application using Streamlit.

It includes functions for rendering every view of the session state machine: the landing
page, the signup form, the dashboard, the intake questionnaire, a single report and the
report history. All state lives in the `SessionController` passed to each function;
widgets only call controller methods and read its attributes.

The main entry point for the signed-in UI is `show_main_app`, which renders the sidebar
and routes to the view the controller currently points at.
"""
# pcosguard/gui.py

import streamlit as st
import datetime
import pandas as pd
from modules import controller as ctl
from modules.intake import default_inputs
from modules.models import BLOOD_GROUPS, CYCLE_STATUSES, yes_no

ZEN_AUDIO_URL = "https://www.soundhelix.com/examples/mp3/SoundHelix-Song-1.mp3"

RISK_BADGES = {"LOW": "🟢", "MODERATE": "🟠", "HIGH": "🔴"}

# (label, field, step) for each numeric widget, grouped by form section.
PHYSICAL_FIELDS = [
    ("Age", "age", 1.0),
    ("Weight (kg)", "weight", 0.1),
    ("Height (cm)", "height", 1.0),
    ("Pulse Rate (bpm)", "pulse_rate", 1.0),
    ("Waist:Hip Ratio", "waist_hip_ratio", 0.01),
]
CLINICAL_FIELDS = [
    ("FSH (mIU/mL)", "fsh", 0.01),
    ("LH (mIU/mL)", "lh", 0.01),
    ("AMH (ng/mL)", "amh", 0.01),
    ("TSH (mIU/L)", "tsh", 0.01),
    ("Prolactin (ng/mL)", "prolactin", 0.01),
    ("Vit D3 (ng/mL)", "vitamin_d3", 0.01),
]
SYMPTOM_FIELDS = [
    ("Weight Gain", "weight_gain"),
    ("Hirsutism", "hair_growth"),
    ("Hair Loss", "hair_loss"),
    ("Acne", "pimples"),
    ("Darkening", "skin_darkening"),
    ("Fast Food", "fast_food"),
    ("Regular Exercise", "exercise"),
    ("Pregnant", "pregnant"),
]


def _format_timestamp(timestamp_ms):
    """Converts an epoch-millisecond timestamp into a human-readable local time.

    Args:
        timestamp_ms (int): Milliseconds since the epoch.

    Returns:
        str: A formatted string (e.g., "Jan 01, 2024 • 14:30"), "Unknown time" if
             missing, or the original value as text if it cannot be converted.
    """
    if timestamp_ms is None:
        return "Unknown time"
    try:
        timestamp = datetime.datetime.fromtimestamp(int(timestamp_ms) / 1000, tz=datetime.timezone.utc)
        return timestamp.astimezone().strftime("%b %d, %Y • %H:%M")
    except (TypeError, ValueError, OverflowError, OSError):
        return str(timestamp_ms)


def _report_rows(result):
    """Returns the (label, value) pairs shown in the report's input table."""
    inputs = result.inputs
    return [
        ("Patient Age", inputs.age),
        ("BMI Index", inputs.bmi),
        ("Cycle Status", inputs.cycle_status),
        ("FSH Level", inputs.fsh),
        ("LH Level", inputs.lh),
        ("AMH Score", inputs.amh),
        ("Vitamin D3", inputs.vitamin_d3),
        ("Acne Presence", yes_no(inputs.pimples)),
        ("Weight Gain", yes_no(inputs.weight_gain)),
        ("Hirsutism", yes_no(inputs.hair_growth)),
        ("Diet Habits", yes_no(inputs.fast_food, "Frequent Fast Food", "Balanced")),
        ("Exercise", yes_no(inputs.exercise, "Active", "Sedentary")),
    ]


def build_text_report(result) -> str:
    """Builds a plain-text report for one assessment, suitable for printing."""
    lines = [
        f"PCOS Guard Clinical Report - Generated on {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
        "=" * 80,
        f"Report ID: {result.id}",
        f"Patient ID: {result.user_id}",
        f"Date: {_format_timestamp(result.timestamp)}",
        f"Risk Level: {result.risk_level.value}",
        f"Confidence: {result.confidence * 100:.0f}%",
        "",
        "Clinical Inputs:",
        "-" * 16,
    ]
    lines.extend(f"{label}: {value}" for label, value in _report_rows(result))
    lines.extend(["", "Summary:", "-" * 8, result.summary or "N/A", "", "Recommendations:", "-" * 16])
    lines.extend(f"{i}. {rec}" for i, rec in enumerate(result.recommendations, start=1))
    lines.append("=" * 80)
    return "\n".join(lines)


def history_dataframe(assessments) -> pd.DataFrame:
    """Tabulates a list of results for display and CSV export."""
    rows = [
        {
            "report_id": r.id,
            "date": _format_timestamp(r.timestamp),
            "risk_level": r.risk_level.value,
            "confidence": r.confidence,
            "bmi": r.inputs.bmi,
            "cycle_status": r.inputs.cycle_status,
            "summary": r.summary,
        }
        for r in assessments
    ]
    return pd.DataFrame(rows, columns=["report_id", "date", "risk_level", "confidence", "bmi", "cycle_status", "summary"])


# Landing and signup pages
def show_landing_page(controller):
    """Displays the entry screen for visitors who are not signed in."""
    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        st.caption("AI-POWERED HORMONAL SCREENING")
        st.markdown("<h1 style='text-align: center;'>Welcome to PCOS Guard</h1>", unsafe_allow_html=True)
        st.markdown(
            "<p style='text-align: center;'>Instant, clinical-grade risk assessment using Random Forest Intelligence.</p>",
            unsafe_allow_html=True
        )
        st.button("Start Free Assessment →", on_click=controller.go_to_signup, type="primary")


def show_signup_form(controller):
    """Displays the signup form and creates the session user on submit."""
    st.button("← Back", on_click=controller.go_to_landing)
    col1, col2, col3 = st.columns([1, 2, 1])
    with col2:
        st.markdown("<h2 style='text-align: center;'>Create Your Profile</h2>", unsafe_allow_html=True)
        with st.form("signup_form"):
            name = st.text_input("Full Name")
            email = st.text_input("Email Address")
            submitted = st.form_submit_button("Create Account")

            if submitted:
                if not name.strip() or not email.strip():
                    st.error("Name and email are required.")
                else:
                    controller.sign_up(name.strip(), email.strip())
                    st.rerun()


# Signed-in application
def show_main_app(controller):
    """
    Renders the sidebar and the view the controller is currently on.

    Args:
        controller (SessionController): The session state for this browser session.
    """
    if not controller.user:
        controller.view = ctl.LANDING
        st.rerun()

    _show_sidebar(controller)

    if controller.view == ctl.HOME:
        _render_home_page(controller)
    elif controller.view == ctl.TEST:
        _render_test_page(controller)
    elif controller.view == ctl.RESULTS and controller.current_result is not None:
        _render_results_page(controller)
    elif controller.view == ctl.HISTORY:
        _render_history_page(controller)
    else:
        controller.navigate(ctl.HOME)
        st.rerun()


def _show_sidebar(controller):
    user = controller.user
    with st.sidebar:
        st.markdown("## PCOS Guard")
        st.image(user.avatar, width=64)
        st.markdown(f"**{user.name}**")
        st.caption(user.email)
        st.divider()
        nav_items = [
            ("🏠 Dashboard", ctl.HOME),
            ("🧪 Start Test", ctl.TEST),
            ("📂 My Reports", ctl.HISTORY),
        ]
        for label, view in nav_items:
            button_type = "primary" if controller.view == view else "secondary"
            st.button(label, key=f"nav_{view}", on_click=controller.navigate, args=(view,),
                      type=button_type)
        st.divider()
        with st.expander("Zen Mode"):
            st.audio(ZEN_AUDIO_URL)
        st.button("Log Out", key="logout_btn", on_click=controller.logout)


def _render_home_page(controller):
    """Renders the dashboard with awareness content and the latest reports."""
    st.markdown(f"## Welcome back, {controller.user.name}")
    st.caption("Your hormonal health dashboard")

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("What is PCOS?")
        st.write(
            "Polycystic Ovary Syndrome (PCOS) is a hormonal disorder common among women of "
            "reproductive age. It can cause enlarged ovaries with small cysts on the outer edges."
        )
        for item in ["Irregular periods", "Excess androgen levels", "Polycystic ovaries"]:
            st.markdown(f"- {item}")
    with col2:
        st.subheader("Awareness & Community")
        st.write(
            "Knowledge is the first step. Help others by sharing information or participating "
            "in awareness camps globally."
        )
        st.link_button("Join Awareness Camp", ctl.AWARENESS_URL)
    st.button("Start New Assessment", key="home_start_test", on_click=controller.start_test, type="primary")

    st.divider()
    st.subheader("Recent Reports")
    recent = controller.recent_assessments()
    if not recent:
        st.info("No reports yet. Take your first assessment to see results here.")
        return
    for result in recent:
        badge = RISK_BADGES.get(result.risk_level.value, "")
        c1, c2, c3 = st.columns([3, 2, 1])
        c1.write(_format_timestamp(result.timestamp))
        c2.write(f"{badge} {result.risk_level.value}")
        c3.button("View", key=f"home_view_{result.id}", on_click=controller.show_result, args=(result,))


def _on_intake_change(controller, field):
    """Widget callback that folds one edited value into the session questionnaire."""
    controller.update_intake(field, st.session_state[f"intake_{field}"])


def _number_field(controller, inputs, label, field, step):
    st.number_input(
        label,
        value=float(getattr(inputs, field)),
        step=step,
        key=f"intake_{field}",
        on_change=_on_intake_change,
        args=(controller, field),
    )


def _select_field(controller, inputs, label, field, options):
    current = getattr(inputs, field)
    st.selectbox(
        label,
        options,
        index=options.index(current) if current in options else 0,
        key=f"intake_{field}",
        on_change=_on_intake_change,
        args=(controller, field),
    )


def _render_test_page(controller):
    """Renders the intake questionnaire and submits it for assessment."""
    if controller.intake is None:
        controller.intake = default_inputs()
    inputs = controller.intake

    st.button("← Back to Dashboard", on_click=controller.navigate, args=(ctl.HOME,))
    st.markdown("<h2 style='text-align: center;'>Clinical Assessment</h2>", unsafe_allow_html=True)

    if controller.error:
        st.error(controller.error)

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Physical Metrics")
        _select_field(controller, inputs, "Blood Group", "blood_group", BLOOD_GROUPS)
        for label, field, step in PHYSICAL_FIELDS:
            _number_field(controller, inputs, label, field, step)
        st.metric("BMI (calculated)", f"{controller.intake.bmi}")
    with col2:
        st.subheader("Clinical Profile")
        for label, field, step in CLINICAL_FIELDS:
            _number_field(controller, inputs, label, field, step)

    col3, col4 = st.columns(2)
    with col3:
        st.subheader("Cycle Info")
        _select_field(controller, inputs, "Status", "cycle_status", CYCLE_STATUSES)
        _number_field(controller, inputs, "Avg Days", "cycle_length", 1.0)
    with col4:
        st.subheader("Symptoms")
        for label, field in SYMPTOM_FIELDS:
            st.checkbox(
                label,
                value=bool(getattr(inputs, field)),
                key=f"intake_{field}",
                on_change=_on_intake_change,
                args=(controller, field),
            )

    submit_label = "ANALYZING CLINICAL DATA..." if controller.is_loading else "SUBMIT ASSESSMENT"
    if st.button(submit_label, key="submit_assessment", disabled=controller.is_loading,
                 type="primary"):
        with st.spinner("Analyzing clinical data..."):
            result = controller.run_test(controller.intake)
        if result is not None:
            st.rerun()
        else:
            st.error(controller.error or ctl.ANALYSIS_ERROR_MESSAGE)


def _render_results_page(controller):
    """Renders one assessment as a report."""
    result = controller.current_result
    st.button("← Back to Dashboard", on_click=controller.navigate, args=(ctl.HOME,))
    st.markdown("<h2 style='text-align: center;'>Clinical Report</h2>", unsafe_allow_html=True)
    st.caption(f"Generated {_format_timestamp(result.timestamp)} • Report {result.id}")

    badge = RISK_BADGES.get(result.risk_level.value, "")
    c1, c2 = st.columns(2)
    c1.metric("Risk Level", f"{badge} {result.risk_level.value}")
    c2.metric("Confidence", f"{result.confidence * 100:.0f}%")

    st.subheader("Input Values")
    inputs_df = pd.DataFrame(_report_rows(result), columns=["Parameter", "Value"])
    inputs_df["Value"] = inputs_df["Value"].astype(str)
    st.table(inputs_df)

    st.subheader("Summary")
    st.write(result.summary)

    st.subheader("Recommendations")
    for i, rec in enumerate(result.recommendations, start=1):
        st.markdown(f"{i}. {rec}")

    st.divider()
    col1, col2 = st.columns(2)
    with col1:
        st.link_button("Consult a Gynecologist", ctl.consult_doctor_url("Gynecologist"))
    with col2:
        st.download_button(
            label="Download Report (.txt)", data=build_text_report(result).encode('utf-8'),
            file_name=f"pcos_report_{result.id}.txt", mime="text/plain"
        )
    st.caption(f"Patient ID: {result.user_id} • Verified Analysis • PCOS Guard AI")


def _render_history_page(controller):
    """Renders every report the signed-in user has taken."""
    st.markdown("<h2 style='text-align: center;'>My Reports</h2>", unsafe_allow_html=True)
    assessments = controller.assessments
    if not assessments:
        st.info("You have no saved reports yet.")
        return

    history_df = history_dataframe(assessments)
    st.download_button(
        "Download History (CSV)", history_df.to_csv(index=False).encode('utf-8'),
        f"pcos_history_{datetime.date.today()}.csv", "text/csv"
    )
    for result in assessments:
        badge = RISK_BADGES.get(result.risk_level.value, "")
        with st.container(border=True):
            st.markdown(f"**{badge} {result.risk_level.value} RISK** · {result.confidence * 100:.0f}% confidence")
            st.caption(_format_timestamp(result.timestamp))
            st.write(result.summary)
            st.button("View Full Report →", key=f"history_view_{result.id}",
                      on_click=controller.show_result, args=(result,))
