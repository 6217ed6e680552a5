"""报价计算页面"""

import asyncio

import pandas as pd
import streamlit as st

from src.core.error_handler import AIError, QuoteRequestError
from src.modules.analysis.service import summarize_for_display
from src.modules.quote.models import BusinessLine, CargoType, TransportMode


def show_quote():
    st.title("💰 Shipment Quote")
    st.caption("Enter cargo details to retrieve carrier rates")

    quote_cfg = st.session_state.config.quote
    cities = quote_cfg.get("cities", [])

    with st.form("quote_form"):
        col1, col2, col3 = st.columns(3)

        with col1:
            origin = st.selectbox(
                "Origin", cities, index=_city_index(cities, quote_cfg.get("default_origin"))
            )
            destination = st.selectbox(
                "Destination", cities, index=_city_index(cities, quote_cfg.get("default_destination"))
            )

        with col2:
            business_line = st.selectbox("Business Line", [item.value for item in BusinessLine])
            cargo_type = st.radio("Cargo Type", [item.value for item in CargoType], horizontal=True)
            mode = st.radio("Transport Mode", [item.value for item in TransportMode], horizontal=True)

        with col3:
            weight = st.number_input("Weight (kg)", min_value=0.0, step=10.0, value=600.0)
            volume = st.number_input("Volume (CBM)", min_value=0.0, step=0.1, value=1.5)

        submitted = st.form_submit_button("Calculate Quotes", use_container_width=True)

    if submitted:
        raw = {
            "origin": origin,
            "destination": destination,
            "business_line": business_line,
            "cargo_type": cargo_type,
            "mode": mode,
            "weight_kg": weight,
            "volume_cbm": volume,
        }
        try:
            request, outcomes = st.session_state.services['quote'].quote_raw(raw)
        except QuoteRequestError as e:
            for field_name, message in e.details.items():
                st.error(f"{field_name}: {message}")
            return
        st.session_state.quote_request = request
        st.session_state.quote_outcomes = outcomes
        st.session_state.quote_analysis = None
        st.session_state.quote_analysis_error = None

    if 'quote_outcomes' in st.session_state:
        show_results(st.session_state.quote_outcomes)
        show_analysis(st.session_state.quote_request, st.session_state.quote_outcomes)


def show_results(outcomes):
    available = [item for item in outcomes if item.is_compatible]
    unavailable = [item for item in outcomes if not item.is_compatible]

    st.subheader(f"Available Carriers ({len(available)})")
    if not available:
        st.info("No carrier can service this shipment.")
    for rank, item in enumerate(available, start=1):
        breakdown = item.breakdown
        label = f"#{rank} {item.carrier_name} · ¥{breakdown.total:,.2f} {breakdown.currency}"
        with st.expander(label, expanded=rank == 1):
            col1, col2, col3 = st.columns(3)
            col1.metric("Base Freight", f"¥{breakdown.base_freight:,.2f}")
            col2.metric("Pickup Fee", f"¥{breakdown.pickup_fee:,.2f}")
            col3.metric("Delivery Fee", f"¥{breakdown.delivery_fee:,.2f}")
            for note in breakdown.notes:
                st.caption(note)

    if unavailable:
        st.subheader(f"Unavailable Carriers ({len(unavailable)})")
        df = pd.DataFrame(
            [{"Carrier": item.carrier_name, "Reason": item.incompatibility_reason} for item in unavailable]
        )
        st.dataframe(df, use_container_width=True, hide_index=True)


def show_analysis(request, outcomes):
    if not any(item.is_compatible for item in outcomes):
        return

    st.subheader("⚡ AI Smart Analysis")
    analysis = st.session_state.get('quote_analysis')
    error = st.session_state.get('quote_analysis_error')

    if analysis is None and st.button("Generate Insights"):
        with st.spinner("Analyzing carrier rules and pricing..."):
            try:
                analysis = asyncio.run(st.session_state.services['analysis'].analyze(request, outcomes))
                error = None
            except AIError as e:
                error = e.message
        st.session_state.quote_analysis = analysis
        st.session_state.quote_analysis_error = error

    if error:
        st.error(error)
    for line in summarize_for_display(analysis):
        st.markdown(line)


def _city_index(cities, city):
    return cities.index(city) if city in cities else 0
