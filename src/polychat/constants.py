"""Project-wide constants for Polychat."""

# ==============================================================================
# Provider Names
# ==============================================================================

OPENAI = "OpenAI"
ANTHROPIC = "Anthropic"
GOOGLE = "Google"
DEEPSEEK = "DeepSeek"
XAI = "xAI"
PERPLEXITY = "Perplexity AI"
MISTRAL = "Mistral AI"
MOONSHOT = "Moonshot AI"
ZHIPU = "Zhipu AI"

KNOWN_PROVIDERS = frozenset(
    {OPENAI, ANTHROPIC, GOOGLE, DEEPSEEK, XAI, PERPLEXITY, MISTRAL, MOONSHOT, ZHIPU}
)

# Providers that search the web on their own; they never get the generic
# function tool.
NATIVE_SEARCH_PROVIDERS = frozenset({OPENAI, GOOGLE, PERPLEXITY, ZHIPU})

# ==============================================================================
# Sampling Parameters
# ==============================================================================

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 1000

# ==============================================================================
# Tool Calling
# ==============================================================================

WEB_SEARCH_TOOL_NAME = "web_search"
OPENAI_SEARCH_MODEL_SUFFIX = "-with-search"

# Extra round-trips a chat turn may spend resolving tool calls: 1 sends tool
# results back once, 0 disables tool execution. Tool calls found in the
# follow-up response are logged and dropped.
MAX_FOLLOWUP_ROUNDS = 1
