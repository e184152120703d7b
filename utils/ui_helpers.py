"""
Helpers para deixar as telas mais intuitivas e consistentes.
"""
from contextlib import contextmanager

import streamlit as st

from config.database import REFRESH_SEGUNDOS
from services import change_feed
from services.errors import NotFoundError, PdvError


def page_header(title: str, icon: str, subtitle: str = ""):
    """Título da página com possível subtítulo."""
    st.markdown(
        f"<p style='margin:0 0 0.25rem 0; font-size:1.25rem;'><strong>{icon} {title}</strong></p>"
        + (f"<p style='margin:0; font-size:0.8rem; color:#666;'>{subtitle}</p>" if subtitle else ""),
        unsafe_allow_html=True,
    )
    st.markdown("---")


def _box(message: str, background: str, border: str, icon: str):
    st.markdown(
        f"""
    <div style="
        background-color: {background};
        border-left: 4px solid {border};
        padding: 14px 18px;
        margin: 12px 0;
        border-radius: 0 8px 8px 0;
        font-weight: 500;
    ">
        {icon} {message}
    </div>
    """,
        unsafe_allow_html=True,
    )


def success_box(message: str):
    """Caixa de status positivo (ex.: caixa aberto)."""
    _box(message, "#e8f5e9", "#43a047", "✅")


def warning_box(message: str):
    """Caixa de atenção (ex.: caixa fechado)."""
    _box(message, "#fff3e0", "#fb8c00", "⚠️")


@contextmanager
def acao(sucesso: str = ""):
    """
    Executa uma ação do usuário: erros do PDV viram notificação na tela
    e a página é recarregada só quando a ação dá certo.
    """
    try:
        yield
    except NotFoundError as exc:
        st.error(f"Falha: {exc}")
    except PdvError as exc:
        st.error(str(exc))
    else:
        if sucesso:
            st.toast(sucesso)
        st.rerun()


def acompanhar_alteracoes(*tabelas: str, chave: str) -> None:
    """
    Recarrega a página quando outro operador grava em alguma das tabelas.
    A página inteira é recalculada; não há atualização parcial.
    """
    estado = f"_versao_{chave}"
    if estado not in st.session_state:
        st.session_state[estado] = change_feed.versao(*tabelas)

    @st.fragment(run_every=REFRESH_SEGUNDOS)
    def _verificar():
        atual = change_feed.versao(*tabelas)
        if atual != st.session_state[estado]:
            st.session_state[estado] = atual
            st.rerun(scope="app")

    _verificar()
