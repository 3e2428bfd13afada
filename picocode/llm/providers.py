"""
Provider table for OpenAI-compatible completion endpoints.

Each provider is reached through the ``openai`` SDK with its own base URL,
API key variable and default model.
"""

import logging
import os

from pydantic import BaseModel, Field

from picocode.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ProviderSpec(BaseModel):
    """
    Connection details for one provider.

    Parameters
    ----------
    name : str
        Provider name as given on the command line.
    base_url : str
        OpenAI-compatible API base URL.
    api_key_env : str | None
        Environment variable holding the API key. None if no key is needed.
    default_model : str
        Model used when none is configured.
    """

    name: str = Field(description="Provider name")
    base_url: str = Field(description="API base URL")
    api_key_env: str | None = Field(default=None, description="API key variable")
    default_model: str = Field(description="Default model")


class ResolvedProvider(BaseModel):
    """A provider with its model and API key filled in."""

    name: str
    base_url: str
    model: str
    api_key: str


_GEMINI = ProviderSpec(
    name="gemini",
    base_url="https://generativelanguage.googleapis.com/v1beta/openai/",
    api_key_env="GEMINI_API_KEY",
    default_model="gemini-1.5-pro",
)

PROVIDERS: dict[str, ProviderSpec] = {
    "anthropic": ProviderSpec(
        name="anthropic",
        base_url="https://api.anthropic.com/v1/",
        api_key_env="ANTHROPIC_API_KEY",
        default_model="claude-3-5-sonnet-20241022",
    ),
    "openai": ProviderSpec(
        name="openai",
        base_url="https://api.openai.com/v1",
        api_key_env="OPENAI_API_KEY",
        default_model="gpt-4o-mini",
    ),
    "deepseek": ProviderSpec(
        name="deepseek",
        base_url="https://api.deepseek.com/v1",
        api_key_env="DEEPSEEK_API_KEY",
        default_model="deepseek-chat",
    ),
    "gemini": _GEMINI,
    "google": _GEMINI,
    "groq": ProviderSpec(
        name="groq",
        base_url="https://api.groq.com/openai/v1",
        api_key_env="GROQ_API_KEY",
        default_model="llama3-70b-8192",
    ),
    "mistral": ProviderSpec(
        name="mistral",
        base_url="https://api.mistral.ai/v1",
        api_key_env="MISTRAL_API_KEY",
        default_model="mistral-large-latest",
    ),
    "moonshot": ProviderSpec(
        name="moonshot",
        base_url="https://api.moonshot.cn/v1",
        api_key_env="MOONSHOT_API_KEY",
        default_model="moonshot-v1-8k",
    ),
    "ollama": ProviderSpec(
        name="ollama",
        base_url="http://localhost:11434/v1",
        api_key_env=None,
        default_model="llama3",
    ),
    "openrouter": ProviderSpec(
        name="openrouter",
        base_url="https://openrouter.ai/api/v1",
        api_key_env="OPENROUTER_API_KEY",
        default_model="meta-llama/llama-3-70b-instruct",
    ),
    "perplexity": ProviderSpec(
        name="perplexity",
        base_url="https://api.perplexity.ai",
        api_key_env="PERPLEXITY_API_KEY",
        default_model="llama-3-sonar-large-32k-online",
    ),
    "together": ProviderSpec(
        name="together",
        base_url="https://api.together.xyz/v1",
        api_key_env="TOGETHER_API_KEY",
        default_model="meta-llama/Llama-3-70b-chat-hf",
    ),
    "xai": ProviderSpec(
        name="xai",
        base_url="https://api.x.ai/v1",
        api_key_env="XAI_API_KEY",
        default_model="grok-1",
    ),
}

# Ollama's OpenAI-compatible endpoint ignores the key but the SDK needs one.
OLLAMA_PLACEHOLDER_KEY: str = "ollama"


def get_provider(name: str) -> ProviderSpec:
    """
    Look up a provider by name.

    Raises
    ------
    ConfigurationError
        If the provider is unknown.
    """
    spec: ProviderSpec | None = PROVIDERS.get(name.lower())
    if spec is None:
        available: str = ", ".join(sorted(PROVIDERS))
        raise ConfigurationError(
            f"Unknown provider: {name} (available: {available})",
            config_key="provider",
        )
    return spec


def resolve_provider(name: str, model: str | None = None) -> ResolvedProvider:
    """
    Resolve a provider's endpoint, model and API key.

    Parameters
    ----------
    name : str
        Provider name.
    model : str | None, optional
        Model override. The provider's default is used when None.

    Returns
    -------
    ResolvedProvider
        Everything needed to build an :class:`~picocode.llm.client.LLMClient`.

    Raises
    ------
    ConfigurationError
        If the provider is unknown or its API key variable is not set.

    Examples
    --------
    >>> provider = resolve_provider("openai")
    >>> provider.model
    'gpt-4o-mini'
    """
    spec = get_provider(name)

    if spec.api_key_env is None:
        api_key: str = OLLAMA_PLACEHOLDER_KEY
    else:
        api_key = os.environ.get(spec.api_key_env, "")
        if not api_key:
            raise ConfigurationError(
                f"Missing API key for provider {spec.name}. "
                f"Please set the {spec.api_key_env} environment variable.",
                config_key=spec.api_key_env,
            )

    resolved_model: str = model or spec.default_model
    logger.debug(f"Using provider {spec.name} with model {resolved_model}")

    return ResolvedProvider(
        name=spec.name,
        base_url=spec.base_url,
        model=resolved_model,
        api_key=api_key,
    )
