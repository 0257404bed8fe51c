"""Streamlit UI for the local live price index.

Run with:
    streamlit run src/price_index/app/streamlit_app.py
"""

from __future__ import annotations

import streamlit as st

from src.price_index.app.controller import SearchController
from src.price_index.app.geolocation import build_locator
from src.price_index.config import settings
from src.price_index.engine.adapter import QueryAdapter
from src.price_index.llm.providers import get_grounding_service
from src.price_index.types.api import StoreCard
from src.price_index.types.state import SearchPhase

API_KEY_INPUT = "api_key_input"
PENDING_QUERY = "pending_query"


def _select_credential() -> str | None:
    """Host credential flow: the key typed into the error card."""
    return (st.session_state.get(API_KEY_INPUT) or "").strip() or None


def get_controller() -> SearchController:
    """Build the controller once per browser session."""
    if "controller" not in st.session_state:
        adapter = QueryAdapter(get_grounding_service(settings))
        controller = SearchController(
            adapter,
            locator=build_locator(settings),
            credential_selector=_select_credential,
        )
        controller.mount()
        st.session_state.controller = controller
    return st.session_state.controller


def render_header(controller: SearchController) -> str | None:
    """Search form plus the location badge; returns a submitted query."""
    st.markdown("## 📉 PriceIndex")
    st.caption("LIVE RETAIL MONITORING")

    col_form, col_loc = st.columns([4, 1])
    with col_loc:
        st.markdown(f"📍 `{controller.location_label()}`")

    with col_form:
        with st.form("search", clear_on_submit=False):
            query = st.text_input(
                "Product",
                value=controller.state.query,
                placeholder="Search product (e.g., NMF Lip balm, iPhone 16)...",
                label_visibility="collapsed",
            )
            submitted = st.form_submit_button(
                "Indexing..." if controller.state.loading else "Index Prices",
                disabled=controller.state.loading,
            )
    return query if submitted else None


def render_welcome() -> None:
    st.markdown("### Live Price Indexer")
    st.write("Compare exact retail prices across local stores. Ranked by best deal first.")

    cols = st.columns(2)
    for idx, item in enumerate(settings.example_queries):
        with cols[idx % 2]:
            if st.button(item, key=f"example_{idx}", width="stretch"):
                st.session_state[PENDING_QUERY] = item
                st.rerun()


def render_error(controller: SearchController) -> None:
    st.markdown("### ⚠️ Index Unreachable")
    st.error(controller.state.error)

    if controller.state.needs_credential:
        st.text_input("Gemini API key", type="password", key=API_KEY_INPUT)
        if st.button("🔑 Select API Project", type="primary", width="stretch"):
            with st.spinner("Indexing..."):
                controller.select_credential()
            st.rerun()


def render_store_card(card: StoreCard) -> None:
    with st.container(border=True):
        if card.is_best_deal:
            st.success("🏷️ BEST LOCAL DEAL")
        st.markdown(f"#### {card.title}")
        st.caption("INDEX PRICE")
        st.markdown(f"## {card.price}")
        st.markdown(f"📍 {card.title}")
        st.caption("MARKET INTELLIGENCE")
        st.write(
            card.insight
            or "Retail data indicates consistent stock levels for this product category."
        )
        st.link_button("Visit Retailer ↗", card.uri, width="stretch")


def render_results(controller: SearchController) -> None:
    result = controller.state.result
    if result is None:
        return

    with st.container(border=True):
        badge = "LIVE RETAIL INDEX"
        if result.references:
            badge += f" · {len(result.references)} STORES FOUND"
        st.caption(badge)
        st.markdown(f"# {controller.state.query}")

        col_price, col_summary = st.columns([1, 2])
        with col_price:
            st.metric("Cheapest In City", controller.best_price())
        with col_summary:
            st.markdown(f"*{controller.summary()}*")

    st.markdown("### 🧭 Verified Prices Near You")

    if not controller.has_map_index():
        with st.container(border=True):
            st.markdown("#### No Direct Map Index")
            st.markdown(result.raw_text)
        return

    cards = controller.store_cards()
    for row_start in range(0, len(cards), 3):
        cols = st.columns(3)
        for col, card in zip(cols, cards[row_start : row_start + 3]):
            with col:
                render_store_card(card)

    with st.expander("Full answer"):
        st.markdown(result.raw_text)


def main() -> None:
    st.set_page_config(page_title="PriceIndex", page_icon="📉", layout="wide")
    controller = get_controller()

    pending = st.session_state.pop(PENDING_QUERY, None)
    if pending:
        with st.spinner("Indexing..."):
            controller.submit(pending)

    query = render_header(controller)
    if query:
        with st.spinner("Indexing..."):
            controller.submit(query)

    phase = controller.state.phase
    if phase is SearchPhase.FAILED:
        render_error(controller)
    elif phase is SearchPhase.SUCCESS:
        render_results(controller)
    else:
        render_welcome()

    st.divider()
    st.caption("Prices indexed via live web & maps metadata. Engine grounded.")


if __name__ == "__main__":
    main()
