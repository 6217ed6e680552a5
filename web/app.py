"""物流报价工具 - Web服务入口"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import streamlit as st

from src.core.config import get_config
from src.core.logger import get_logger
from src.modules.analysis.service import QuoteAnalysisService
from src.modules.quote import QuoteService

config = get_config()
logger = get_logger(__name__)

# 页面配置
st.set_page_config(
    page_title="DKSH Logistics Quote Engine",
    page_icon="🚚",
    layout="wide",
    initial_sidebar_state="expanded"
)

# 初始化session state
if 'config' not in st.session_state:
    st.session_state.config = config
    st.session_state.logger = logger

if 'services' not in st.session_state:
    st.session_state.services = {
        'quote': QuoteService(),
        'analysis': QuoteAnalysisService(),
    }

# 侧边栏
with st.sidebar:
    st.title("🚚 Logistics Quote Engine")
    st.markdown("---")

    page = st.radio(
        "选择功能",
        ["💰 报价计算", "🚛 承运商"]
    )

    st.markdown("---")
    st.subheader("AI 分析")
    if st.session_state.services['analysis'].available:
        st.success("✅ 已配置")
    else:
        st.warning("⚠️ 未配置 API Key")

# 主页面
if page == "💰 报价计算":
    from web.pages.quote import show_quote
    show_quote()

elif page == "🚛 承运商":
    from web.pages.carriers import show_carriers
    show_carriers()
