"""
Streamlit Frontend for Burnrate

The screen the user checks every day: how much may I still spend today,
and how close am I to running out.

DESIGN PRINCIPLES:
1. One number up front: the allowed spend for today
2. Visual pressure grows with the severity stage
3. Every figure on screen comes from one pacing snapshot
4. Rounding happens only when a value is displayed

Screens:
- Setup: budget and date range for a new cycle
- Dashboard: pacing figures, add expense, details, reset
- History: archived cycles
"""

from datetime import date

import streamlit as st

from burnrate.config import get_settings, validate_all_settings
from burnrate.models.cycle import ExpenseCategory
from burnrate.models.pacing import CycleStage, PacingSnapshot
from burnrate.orchestrator import (
    BudgetFlow,
    InputRejectedError,
    NoActiveCycleError,
    create_app_components,
)
from burnrate.presentation import (
    burn_widget_tone,
    format_deviation,
    format_money,
    format_percent,
    pace_chart_series,
    prediction_message,
    survival_effect,
    survival_fill,
)
from burnrate.services.storage import StorageError
from burnrate.validation import default_cycle_dates, default_end_for


st.set_page_config(
    page_title="Burnrate",
    page_icon="🔥",
    layout="centered",
    initial_sidebar_state="collapsed",
)

STAGE_STYLES = {
    CycleStage.STABLE: "border-left: 5px solid #28a745;",
    CycleStage.MILD: "border-left: 5px solid #ffc107;",
    CycleStage.CRITICAL: "border-left: 5px solid #fd7e14; background-color: #fff3e6;",
    CycleStage.COLLAPSE: "border-left: 5px solid #dc3545; background-color: #f8d7da;",
}


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    try:
        return create_app_components(use_storage=True)
    except StorageError as e:
        st.error(f"Storage unavailable, using a temporary session: {e}")
        return create_app_components(use_storage=False)


def money(amount: float) -> str:
    return format_money(amount, get_settings().app.currency_symbol)


def main():
    """Main application entry point."""
    flow, _ = get_components()

    page = st.sidebar.radio(
        "Navigate to:",
        ["🔥 Budget", "🪦 History", "⚙️ Settings"],
        index=0,
    )

    try:
        if page == "🔥 Budget":
            snapshot = flow.dashboard()
            if snapshot is None:
                render_setup_page(flow)
            else:
                render_dashboard(flow, snapshot)
        elif page == "🪦 History":
            render_history_page(flow)
        elif page == "⚙️ Settings":
            render_settings_page()
    except Exception as e:
        flow.report_error(page, e)
        st.error("Something went wrong. The error has been logged.")
        if get_settings().app.debug_mode:
            st.exception(e)


def render_setup_page(flow: BudgetFlow):
    """Render the new-cycle form."""
    st.title("Set up your cycle")

    default_start, default_end = default_cycle_dates(flow.today())

    budget = st.text_input("Monthly budget", placeholder="e.g. 3 000", key="setup_budget")
    start = st.date_input("Cycle start", value=default_start)
    end = st.date_input(
        "Cycle end",
        value=default_end_for(start) if isinstance(start, date) else default_end,
    )

    if st.button("Start cycle", type="primary", key="start_cycle"):
        try:
            flow.start_cycle(budget, start, end)
        except (InputRejectedError, StorageError) as e:
            st.error(str(e))
            return
        st.rerun()


def render_dashboard(flow: BudgetFlow, snapshot: PacingSnapshot):
    """Render the pacing dashboard for the active cycle."""
    style = STAGE_STYLES[snapshot.stage]
    st.markdown(
        f"""
        <div style="padding: 20px; border-radius: 10px; {style}">
            <div>Allowed today</div>
            <div style="font-size: 2.5em; font-weight: bold;">{money(snapshot.allowed_daily)}</div>
            <div>Spent today: {money(snapshot.spent_today)}
                ({format_deviation(snapshot.deviation_percent)})</div>
            <div>Burn: {burn_widget_tone(snapshot).value}</div>
        </div>
        """,
        unsafe_allow_html=True,
    )

    effect = survival_effect(snapshot)
    st.markdown(
        f"**Survival {format_percent(snapshot.remaining_percent)}**"
        + (f" · _{effect.value}_" if effect else "")
    )
    st.progress(survival_fill(snapshot) / 100)

    col1, col2, col3 = st.columns(3)
    col1.metric("Remaining", money(snapshot.remaining_budget))
    col2.metric("Days left", snapshot.remaining_days)
    col3.metric("Discipline", format_percent(snapshot.discipline_index))

    render_expense_form(flow)

    with st.expander("Details"):
        st.write(prediction_message(snapshot))
        st.line_chart(pace_chart_series(snapshot), x="day", y=["ideal", "actual"])
        for share in snapshot.categories:
            st.write(f"{share.name}: {money(share.amount)} ({format_percent(share.percent)})")

    with st.expander("Emergency budget change"):
        delta = st.number_input("Change by", value=0.0, step=100.0, key="budget_delta")
        if st.button("Apply change", key="apply_budget_change") and delta:
            try:
                outcome = flow.adjust_budget(delta)
            except (NoActiveCycleError, StorageError) as e:
                st.error(str(e))
                return
            if outcome.archived:
                st.error("Budget cut to nothing. The cycle has been archived.")
            else:
                st.rerun()

    with st.expander("Reset"):
        st.warning("This clears the current cycle without recording it in history.")
        if st.button("Reset cycle", key="reset_cycle"):
            try:
                flow.reset()
            except StorageError as e:
                st.error(str(e))
                return
            st.rerun()


def render_expense_form(flow: BudgetFlow):
    with st.form("add-expense", clear_on_submit=True):
        amount = st.text_input("Amount")
        category = st.selectbox(
            "Category",
            options=list(ExpenseCategory),
            index=list(ExpenseCategory).index(ExpenseCategory.OTHER),
            format_func=lambda x: x.value.title(),
        )
        comment = st.text_input("Comment (optional)")
        submitted = st.form_submit_button("Add expense")

    if not submitted:
        return
    try:
        outcome = flow.log_expense(amount, category, comment)
    except (InputRejectedError, NoActiveCycleError, StorageError) as e:
        st.error(str(e))
        return

    if outcome.archived:
        st.error(
            f"Budget exhausted after {outcome.archived.days_survived} days. "
            "The cycle has been archived."
        )
        return
    st.rerun()


def render_history_page(flow: BudgetFlow):
    """Render archived cycles, newest first."""
    st.title("🪦 History")

    records = list(reversed(flow.history()))
    if not records:
        st.info("No archived cycles yet.")
        return

    for record in records:
        when = record.at.strftime("%d %b %Y") if record.at else "unknown date"
        st.markdown(
            f"- **{when}**: survived {record.days_survived} days, "
            f"overspent {money(record.overspent_amount)} "
            f"({record.end_reason.value.replace('_', ' ')})"
        )


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    status = validate_all_settings()
    for name, key in [("Storage", "storage"), ("Application", "app")]:
        if status.get(key, False):
            st.success(f"✅ {name} settings loaded")
        else:
            st.error(f"❌ {name} - {status.get(f'{key}_error', 'Not configured')}")

    storage = get_settings().storage
    st.markdown(f"Backend: `{storage.backend}` · Data file: `{storage.data_path}`")

    app = get_settings().app
    st.markdown(
        f"Environment: `{app.app_environment}`"
        + (" · debug mode" if app.debug_mode else "")
    )


if __name__ == "__main__":
    main()
