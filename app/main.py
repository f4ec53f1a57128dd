"""
Streamlit Frontend for Comissio

This is the dashboard a salesperson uses to record sales and follow
what they are owed, month by month.

DESIGN PRINCIPLES:
1. The four numbers that matter are always on top
2. Every installment can be marked paid with one click
3. Form errors are explained in plain language
4. The AI panel is optional and never blocks the dashboard

All text shown to the user is in Brazilian Portuguese.
"""

import asyncio
import html
from datetime import date

import altair as alt
import pandas as pd
import streamlit as st

from comissio.agents import INSIGHT_FALLBACK_MESSAGE
from comissio.models.commission import InstallmentStatus
from comissio.orchestrator import CommissionTracker, create_app_components
from comissio.services.storage import StorageError
from comissio.utils.formatters import format_currency, format_date


# Page configuration
st.set_page_config(
    page_title="Comissio",
    page_icon="💼",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .insight-box {
        padding: 20px;
        background-color: #1e1b4b;
        color: #e0e7ff;
        border-radius: 12px;
        margin: 10px 0;
        white-space: pre-line;
    }
    .month-header {
        padding: 8px 12px;
        background-color: #f8fafc;
        border-radius: 6px;
        font-size: 0.8em;
        font-weight: bold;
        color: #64748b;
        text-transform: uppercase;
    }
</style>
""", unsafe_allow_html=True)

SAVE_FAILED_MESSAGE = (
    "Não foi possível salvar os dados. Verifique o espaço em disco e tente novamente."
)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_tracker() -> CommissionTracker:
    """Get or create the tracker (cached)."""
    try:
        return create_app_components(use_storage=True)
    except Exception as e:
        st.error(f"Falha ao inicializar o armazenamento: {e}")
        return create_app_components(use_storage=False)


def main():
    """Main application entry point."""
    tracker = get_tracker()

    st.sidebar.title("💼 Comissio")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navegar para:",
        ["📊 Painel", "➕ Nova Comissão", "📋 Extrato", "⚙️ Configurações"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Como usar:**
        1. Lance cada venda em "Nova Comissão"
        2. Acompanhe as parcelas no Extrato
        3. Marque cada parcela como paga ao receber
        """
    )

    if page == "📊 Painel":
        render_dashboard_page(tracker)
    elif page == "➕ Nova Comissão":
        render_new_commission_page(tracker)
    elif page == "📋 Extrato":
        render_statement_page(tracker)
    elif page == "⚙️ Configurações":
        render_settings_page()


def render_summary_cards(tracker: CommissionTracker):
    """The four dashboard totals."""
    summary = tracker.summary()

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total em Carteira", format_currency(summary.total_expected))
    col2.metric("Recebido Total", format_currency(summary.total_received))
    col3.metric("Projeção do Mês", format_currency(summary.month_revenue))
    col4.metric("Pendente no Mês", format_currency(summary.month_pending))


def build_cash_flow_chart(tracker: CommissionTracker) -> alt.Chart:
    """Area chart of the 10-month cash-flow window."""
    points = tracker.cash_flow()
    df = pd.DataFrame([
        {
            "order": index,
            "month": point.label,
            "value": float(point.value),
            "formatted": format_currency(point.value),
        }
        for index, point in enumerate(points)
    ])

    return alt.Chart(df).mark_area(
        line={"color": "#4f46e5"},
        color="#c7d2fe",
        opacity=0.6,
    ).encode(
        # Keep chronological order instead of sorting labels alphabetically
        x=alt.X("month:N", sort=alt.EncodingSortField(field="order"), title=None),
        y=alt.Y("value:Q", title="R$"),
        tooltip=[
            alt.Tooltip("month:N", title="Mês"),
            alt.Tooltip("formatted:N", title="Comissão"),
        ],
    ).properties(height=280)


def render_dashboard_page(tracker: CommissionTracker):
    """Render the main dashboard."""
    st.title("📊 Painel")

    render_summary_cards(tracker)

    st.markdown("---")
    col_chart, col_ai = st.columns([2, 1])

    with col_chart:
        st.subheader("Fluxo de Caixa (Realizado + Projetado)")
        st.altair_chart(build_cash_flow_chart(tracker), use_container_width=True)

    with col_ai:
        render_insight_panel(tracker)


def render_insight_panel(tracker: CommissionTracker):
    """AI insight panel; one request at a time."""
    st.subheader("⚡ Insights da IA")

    if "ai_insight" not in st.session_state:
        st.session_state.ai_insight = None

    if st.session_state.ai_insight == INSIGHT_FALLBACK_MESSAGE:
        st.warning(INSIGHT_FALLBACK_MESSAGE)
    elif st.session_state.ai_insight:
        # Model output can echo user-typed descriptions
        st.markdown(
            f'<div class="insight-box">{html.escape(st.session_state.ai_insight)}</div>',
            unsafe_allow_html=True,
        )
    else:
        st.caption("Pronto para analisar sua performance e dar dicas personalizadas.")

    if not tracker.has_insight_agent:
        st.info("Configure GEMINI_API_KEY para habilitar a análise.")
        return

    label = "Recalcular Insights" if st.session_state.ai_insight else "Gerar Análise"
    if st.button(label, disabled=not tracker.commissions):
        with st.spinner("Analisando suas vendas..."):
            st.session_state.ai_insight = run_async(tracker.request_insights())
        st.rerun()


def render_new_commission_page(tracker: CommissionTracker):
    """Render the new commission form."""
    st.title("➕ Nova Comissão")

    with st.form("new_commission", clear_on_submit=True):
        description = st.text_input(
            "Descrição do Serviço *",
            placeholder="Ex: Consultoria de Marketing",
        )
        client_name = st.text_input(
            "Nome do Cliente *",
            placeholder="Ex: João Silva",
        )

        col1, col2 = st.columns(2)
        with col1:
            total_value = st.text_input(
                "Valor Total (R$) *",
                placeholder="0,00",
            )
        with col2:
            sale_date = st.date_input(
                "Data da Venda *",
                value=date.today(),
                format="DD/MM/YYYY",
            )

        installment_count = st.selectbox(
            "Número de Parcelas",
            options=tracker.validator.allowed_installment_counts,
            format_func=lambda n: f"{n}x",
        )

        submitted = st.form_submit_button("Lançar Comissão", type="primary")

    if submitted:
        try:
            result = tracker.submit_commission(
                description=description,
                client_name=client_name,
                total_value=total_value,
                sale_date=sale_date,
                installment_count=installment_count,
            )
        except StorageError:
            st.error(SAVE_FAILED_MESSAGE)
            return

        if result.is_valid:
            commission = result.commission
            st.success(
                f"Comissão lançada: {commission.client_name} - "
                f"{format_currency(commission.total_value)} em "
                f"{commission.installment_count}x"
            )
        else:
            for issue in result.issues:
                st.error(issue.message)


def render_statement_page(tracker: CommissionTracker):
    """Render the statement grouped by month."""
    st.title("📋 Extrato de Comissões")

    groups = tracker.statement()
    if not groups:
        st.info("Nenhuma comissão lançada ainda.")
        return

    for group in groups:
        st.markdown(
            f'<div class="month-header">{group.label} · '
            f'{group.count} lançamentos · {format_currency(group.total)}</div>',
            unsafe_allow_html=True,
        )

        for inst in group.installments:
            commission = tracker.commission_for(inst)
            col_info, col_value, col_action = st.columns([4, 2, 2])

            with col_info:
                st.markdown(f"**{commission.description if commission else ''}**")
                client = commission.client_name if commission else ""
                st.caption(
                    f"{client} • Parcela {inst.label} • {format_date(inst.due_date)}"
                )

            with col_value:
                amount = format_currency(inst.value)
                if inst.status == InstallmentStatus.PAID:
                    st.markdown(f":green[**{amount}**]")
                else:
                    st.markdown(f"**{amount}**")

            with col_action:
                button_label = "✅ Pago" if inst.is_paid else "Marcar Pago"
                if st.button(button_label, key=f"toggle-{inst.id}"):
                    try:
                        tracker.toggle_installment(inst.id)
                    except StorageError:
                        st.error(SAVE_FAILED_MESSAGE)
                    else:
                        st.rerun()


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Configurações")

    st.markdown("### Status dos Serviços")

    from comissio.config import validate_all_settings

    status = validate_all_settings()

    services = [
        ("Gemini (IA)", "gemini"),
        ("Armazenamento local", "storage"),
        ("Aplicação", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configurado")
        else:
            error = status.get(f"{key}_error", "Não configurado")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuração")
    st.markdown(
        "Para configurar a aplicação, crie um arquivo `.env` com sua chave "
        "`GEMINI_API_KEY`. Veja `.env.example` para as variáveis disponíveis."
    )


if __name__ == "__main__":
    main()
