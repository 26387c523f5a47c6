"""Streamlit UI for editing and previewing Flex Message documents.

Run with: streamlit run ui/app.py
"""

# Add project root to sys.path for imports to work when run via streamlit
import sys
from pathlib import Path

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json  # noqa: E402

import httpx  # noqa: E402
import streamlit as st  # noqa: E402
import streamlit.components.v1 as components  # noqa: E402

from backend.app.rendering.preview import render_preview_html  # noqa: E402
from ui.helpers import (  # noqa: E402
    blocking_reason,
    call_compile,
    call_validate,
    create_doc,
    format_issue,
    get_auth_header,
    list_docs,
    publish_doc,
    status_badge,
)

# Configuration
BACKEND_URL = "http://localhost:8000"

# Page config
st.set_page_config(
    page_title="Flex Studio",
    page_icon="💬",
    layout="wide",
)

# Initialize session state
if "doc_id" not in st.session_state:
    st.session_state.doc_id = None
if "document_text" not in st.session_state:
    st.session_state.document_text = ""
if "error" not in st.session_state:
    st.session_state.error = None
if "published" not in st.session_state:
    st.session_state.published = None

st.title("💬 Flex Studio")
st.markdown("*Edit a card document, check it, preview it and publish it*")
st.divider()

col_left, col_center, col_right = st.columns([1, 2, 1.5])

# =============================================================================
# LEFT COLUMN - DOCUMENTS
# =============================================================================
with col_left:
    st.subheader("📂 Documents")

    template = st.selectbox("Template", options=["bubble", "carousel", "special"])
    card_count = st.number_input("Cards", min_value=1, max_value=5, value=3, disabled=template != "carousel")

    if st.button("➕ New document", use_container_width=True):
        try:
            created = create_doc(BACKEND_URL, template, int(card_count))
            st.session_state.doc_id = created["doc_id"]
            st.session_state.document_text = json.dumps(created["content"], indent=2, ensure_ascii=False)
            st.session_state.error = None
        except httpx.HTTPError as e:
            st.session_state.error = str(e)

    try:
        docs = list_docs(BACKEND_URL)
    except httpx.HTTPError as e:
        docs = []
        st.caption(f"_Backend unavailable: {e}_")

    for doc in docs:
        label = f"{status_badge(doc['status'])} {doc['title'] or '(untitled)'}"
        if st.button(label, key=f"doc-{doc['doc_id']}", use_container_width=True):
            st.session_state.doc_id = doc["doc_id"]
            detail = httpx.get(f"{BACKEND_URL}/docs/{doc['doc_id']}", headers=get_auth_header())
            if detail.is_success:
                st.session_state.document_text = json.dumps(detail.json()["content"], indent=2, ensure_ascii=False)

# =============================================================================
# CENTER COLUMN - EDITOR + PREVIEW
# =============================================================================
with col_center:
    st.subheader("✏️ Document JSON")
    st.session_state.document_text = st.text_area(
        "Document",
        value=st.session_state.document_text,
        height=360,
        label_visibility="collapsed",
    )

    document = None
    if st.session_state.document_text.strip():
        try:
            document = json.loads(st.session_state.document_text)
        except json.JSONDecodeError as e:
            st.error(f"❌ Invalid JSON: {e}")

    st.subheader("👀 Preview")
    if document is not None:
        try:
            message = call_compile(BACKEND_URL, document, doc_id=st.session_state.doc_id)
            components.html(render_preview_html(message), height=520, scrolling=True)
        except httpx.HTTPError as e:
            st.error(f"❌ Preview failed: {e}")
    else:
        st.info("👈 Create or open a document to see its preview here.")

# =============================================================================
# RIGHT COLUMN - CHECKS & PUBLISH
# =============================================================================
with col_right:
    st.subheader("🔍 Checks")

    if document is not None:
        try:
            report = call_validate(BACKEND_URL, document)
        except httpx.HTTPError as e:
            report = None
            st.error(f"❌ Validation failed: {e}")

        if report is not None:
            st.markdown(f"**Status:** {status_badge(report['status'])}")
            reason = blocking_reason(report)
            if reason:
                st.caption(reason)

            st.markdown("#### Errors")
            if report["errors"]:
                for issue in report["errors"]:
                    st.markdown(f"- {format_issue(issue)}")
            else:
                st.success("✅ No errors")

            st.markdown("#### Warnings")
            for issue in report["warnings"]:
                st.markdown(f"- {format_issue(issue)}")
            if not report["warnings"]:
                st.caption("_No warnings_")

        st.divider()

        if st.session_state.doc_id and st.button("🚀 Save & publish", type="primary", use_container_width=True):
            try:
                httpx.put(
                    f"{BACKEND_URL}/docs/{st.session_state.doc_id}",
                    json=document,
                    headers=get_auth_header(),
                ).raise_for_status()
                st.session_state.published = publish_doc(BACKEND_URL, st.session_state.doc_id)
                st.session_state.error = None
            except httpx.HTTPStatusError as e:
                st.session_state.published = None
                st.session_state.error = e.response.text

        if st.session_state.published:
            published = st.session_state.published
            st.success(f"Published version {published['version_no']}")
            st.code(published["share_url"])

    if st.session_state.error:
        st.error(f"❌ {st.session_state.error}")
