"""承运商策略页面"""

import pandas as pd
import streamlit as st


def show_carriers():
    st.title("🚛 Carrier Policies")

    registry = st.session_state.services['quote'].registry
    rows = []
    for carrier in registry:
        data = carrier.to_dict()
        rows.append({
            "ID": data["id"],
            "Carrier": data["name"],
            "Base": data["base_location"],
            "Billing": data["billing_basis"],
            "Split Point (kg)": data["split_point_kg"],
            "Lines": ", ".join(data["supported_lines"]),
            "Cargo": ", ".join(data["supported_types"]),
            "Modes": ", ".join(data["supported_modes"]),
            "Fees": data["fee_rules"],
            "Notes": data["notes"] or "",
        })

    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
