import streamlit as st

from techpoints.config import settings
from techpoints.services.formatting import format_datetime, format_int, status_label
from techpoints.services.import_stream import ImportProgress
from techpoints.schemas.services import ImportStatus
from techpoints.ui.api_client import get_client, APIError
from techpoints.ui.auth import require_admin

st.set_page_config(page_title="Import Spreadsheet")
require_admin()

st.title("📁 Import Spreadsheet")
st.caption("Built for large volumes. Accepts .csv, .xlsx and .xls.")

client = get_client()

# --- Upload ---
uploaded = st.file_uploader("Spreadsheet", type=["csv", "xlsx", "xls"])

if st.button("Start import", type="primary", disabled=uploaded is None):
    progress = ImportProgress(expected_rows=settings.IMPORT_PROGRESS_ROWS)
    status = st.empty()
    bar = st.progress(0.0)
    counters = st.empty()
    log_box = st.empty()

    try:
        for event in client.stream_import(
            uploaded.name, uploaded.getvalue(), uploaded.type or "application/octet-stream",
        ):
            progress.apply(event)
            if progress.error:
                break
            status.subheader(progress.status_text)
            bar.progress(progress.percent / 100)
            parts = [f"📄 Rows: **{progress.processed}**", f"✅ Success: **{progress.success}**"]
            if progress.duplicates:
                parts.append(f"⚠️ Duplicates: **{progress.duplicates}**")
            if progress.invalid_dates:
                parts.append(f"❌ Invalid date: **{progress.invalid_dates}**")
            counters.markdown(" · ".join(parts))
            log_box.code("\n".join(progress.logs[-50:]) or " ", language=None)
    except APIError as e:
        st.error(f"Import failed: {e.detail}")

    if progress.error:
        st.error(f"Error: {progress.error}")
    elif progress.done:
        st.success("Import finished!")
        st.page_link("pages/1_dashboard.py", label="View dashboard", icon="📊")

st.divider()

# --- History ---
st.subheader("📂 Import History")

try:
    history = client.list_import_history()
except APIError as e:
    st.error(f"Failed to load history: {e.detail}")
    st.stop()

if not history:
    st.info("No imports found.")
else:
    for item in history:
        with st.container(border=True):
            c1, c2, c3 = st.columns([4, 2, 2])
            c1.write(f"📄 **{item.filename}**")
            c1.caption(
                f"📅 {format_datetime(item.created_at)} · 📊 {format_int(item.row_count)} records"
            )
            c2.write(status_label(item.status))

            if item.status == ImportStatus.COMPLETED:
                confirm = c3.checkbox("Confirm", key=f"confirm_{item.id}")
                if c3.button("↩️ Undo", key=f"revert_{item.id}", disabled=not confirm):
                    with st.spinner("Reverting..."):
                        try:
                            client.revert_import(item.id)
                            st.toast(f"Import of {item.filename} reverted.")
                            st.rerun()
                        except APIError as e:
                            st.error(f"Failed to revert import: {e.detail}")
