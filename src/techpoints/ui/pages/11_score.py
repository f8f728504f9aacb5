import pandas as pd
import streamlit as st

from techpoints.services.dashboard_service import score_breakdown
from techpoints.services.formatting import format_int
from techpoints.ui.api_client import get_client, APIError

st.set_page_config(page_title="My Score")

user_id = st.query_params.get("user_id")
if not user_id:
    st.error("User not found.")
    st.stop()

client = get_client()

try:
    score = client.get_score(user_id)
except APIError as e:
    st.error("User not found." if e.status_code == 404 else f"Failed to load score: {e.detail}")
    st.stop()

st.title(f"Hello, {score.user.name}")
st.write("Here is a summary of your productivity.")

with st.container(border=True):
    st.caption("TOTAL SCORE")
    st.header(format_int(score.total_score))
    st.caption("points accumulated")

breakdown = score_breakdown(score)
if breakdown:
    st.subheader("Where your points come from")
    st.bar_chart(pd.Series(breakdown, name="Points"), horizontal=True)
else:
    st.info("No services recorded yet.")
