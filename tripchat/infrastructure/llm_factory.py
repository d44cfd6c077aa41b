"""LLM 工厂：根据环境变量决定是否启用 LLM

支持的环境变量（按优先级）：
  DASHSCOPE_API_KEY  → 阿里云通义千问（DashScope OpenAI 兼容端点）
  OPENAI_API_KEY     → OpenAI 原生
  LLM_API_KEY        → 自定义兼容端点（需配合 LLM_BASE_URL）

可选：
  LLM_MODEL    : 模型名，默认按供应商自动选择
  LLM_BASE_URL : 自定义 base_url
"""

from __future__ import annotations

import os
import threading
from typing import Optional

from langchain_openai import ChatOpenAI

_DASHSCOPE_BASE_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1"
_DASHSCOPE_DEFAULT_MODEL = "qwen-plus"
_OPENAI_BASE_URL = "https://api.openai.com/v1"
_OPENAI_DEFAULT_MODEL = "gpt-4o-mini"


def _resolve_config() -> tuple[str, str, str] | None:
    """返回 (api_key, base_url, model) 或 None。"""
    ds_key = os.getenv("DASHSCOPE_API_KEY")
    if ds_key:
        return (
            ds_key,
            os.getenv("LLM_BASE_URL", _DASHSCOPE_BASE_URL),
            os.getenv("LLM_MODEL", _DASHSCOPE_DEFAULT_MODEL),
        )

    for name in ("OPENAI_API_KEY", "LLM_API_KEY"):
        key = os.getenv(name)
        if key:
            return (
                key,
                os.getenv("LLM_BASE_URL", _OPENAI_BASE_URL),
                os.getenv("LLM_MODEL", _OPENAI_DEFAULT_MODEL),
            )

    return None


def resolve_llm_provider() -> str:
    if os.getenv("DASHSCOPE_API_KEY"):
        return "dashscope"
    if os.getenv("OPENAI_API_KEY"):
        return "openai"
    if os.getenv("LLM_API_KEY"):
        return "llm_compatible"
    return "template"


# 模块级单例缓存
_llm_lock = threading.Lock()
_llm_instance: Optional[ChatOpenAI] = None
_llm_resolved: bool = False  # 区分 None（无 key）和未初始化


def get_llm() -> Optional[ChatOpenAI]:
    """根据环境变量创建 LLM 实例（单例）。无 key 则返回 None（模板模式）。"""
    global _llm_instance, _llm_resolved
    with _llm_lock:
        if _llm_resolved:
            return _llm_instance

        cfg = _resolve_config()
        if cfg is not None:
            api_key, base_url, model = cfg
            _llm_instance = ChatOpenAI(
                model=model,
                temperature=0.7,
                api_key=api_key,
                base_url=base_url,
                timeout=int(os.getenv("LLM_TIMEOUT_SECONDS", "30")),
                max_retries=0,
            )
        _llm_resolved = True
        return _llm_instance


def reset_llm() -> None:
    """重置 LLM 单例（测试用）"""
    global _llm_instance, _llm_resolved
    with _llm_lock:
        _llm_instance = None
        _llm_resolved = False


def is_llm_available() -> bool:
    return _resolve_config() is not None


__all__ = ["get_llm", "is_llm_available", "reset_llm", "resolve_llm_provider"]
