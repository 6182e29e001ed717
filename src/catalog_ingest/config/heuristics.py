"""Keyword tables driving candidate filtering, tagging and localization.

Every table is an immutable value passed into the component that uses it, so
tests can swap in fixture tables without touching module state.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from catalog_ingest.domain.model.enums import EntryKind


@dataclass(frozen=True, slots=True)
class KeywordRule:
    """Maps any of ``keywords`` (matched as whole words) to ``label``."""

    label: str
    keywords: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class HeuristicTables:
    kind: EntryKind
    kind_label: str
    positive_keywords: tuple[str, ...]
    negative_keywords: tuple[str, ...]
    strong_positive_markers: tuple[str, ...]
    official_owners: frozenset[str]
    base_category: str
    tag_rules: tuple[KeywordRule, ...] = ()
    category_rules: tuple[KeywordRule, ...] = ()
    baseline_tags: tuple[str, ...] = ()
    max_tags: int = 10
    max_categories: int = 3
    image_suffixes: tuple[str, ...] = (
        "logo.png",
        "assets/logo.png",
        "docs/logo.png",
        "images/logo.png",
    )
    icon_suffixes: tuple[str, ...] = ("icon.png", "assets/icon.png", "favicon.png")


@dataclass(frozen=True, slots=True)
class LocalizationTables:
    """Word-substitution dictionary plus kind templates for the secondary language."""

    language: str
    kind_marker: str
    kind_prefix: str
    fallback_template: str
    dictionary: tuple[tuple[str, str], ...] = field(default_factory=tuple)


_NEGATIVE_KEYWORDS: tuple[str, ...] = (
    "client",
    "frontend",
    "website",
    "documentation",
    "docs",
    "tutorial",
    "example",
    "demo",
    "test",
    "awesome",
    "list",
    "template",
    "boilerplate",
    "starter",
    "hello-world",
)

_SHARED_TAG_RULES: tuple[KeywordRule, ...] = (
    KeywordRule("database", ("database", "db", "sql", "postgres", "postgresql", "mysql", "sqlite")),
    KeywordRule("filesystem", ("file", "files", "filesystem", "storage")),
    KeywordRule("web", ("web", "http", "api", "rest")),
    KeywordRule("git", ("git", "github", "gitlab", "version control")),
    KeywordRule("docker", ("docker", "container")),
    KeywordRule("kubernetes", ("kubernetes", "k8s")),
    KeywordRule("cloud", ("aws", "amazon", "azure", "gcp", "cloud")),
    KeywordRule("messaging", ("slack", "discord", "chat", "telegram")),
    KeywordRule("email", ("email", "mail", "gmail")),
    KeywordRule("calendar", ("calendar", "schedule")),
    KeywordRule("images", ("image", "photo", "picture")),
    KeywordRule("documents", ("pdf", "document", "documents")),
    KeywordRule("search", ("search", "index")),
    KeywordRule("ai", ("ai", "llm", "openai", "anthropic")),
    KeywordRule("utility", ("tool", "utility")),
)

_MCP_CATEGORY_RULES: tuple[KeywordRule, ...] = (
    KeywordRule("Database", ("database", "db", "sql")),
    KeywordRule("Storage", ("file", "storage")),
    KeywordRule("Web Services", ("web", "api", "http")),
    KeywordRule("Development Tools", ("tool", "utility")),
    KeywordRule("Integration", ("integration", "connector")),
    KeywordRule("AI/ML", ("ai", "llm", "machine learning")),
    KeywordRule("Communication", ("communication", "chat", "messaging")),
    KeywordRule("Productivity", ("productivity", "office")),
)

_AGENT_CATEGORY_RULES: tuple[KeywordRule, ...] = (
    KeywordRule("Coding", ("coding", "code", "developer", "programming")),
    KeywordRule("Research", ("research", "paper", "papers")),
    KeywordRule("Browser Automation", ("browser", "web automation", "playwright")),
    KeywordRule("Multi-Agent", ("multi-agent", "swarm", "crew")),
    KeywordRule("Data Analysis", ("data", "analytics", "pandas")),
    KeywordRule("Voice", ("voice", "speech", "audio")),
)

_PT_DICTIONARY: tuple[tuple[str, str], ...] = (
    ("mcp servers", "servidores MCP"),
    ("mcp server", "servidor MCP"),
    ("ai agents", "agentes de IA"),
    ("ai agent", "agente de IA"),
    ("version control", "controle de versão"),
    ("real-time", "tempo real"),
    ("filesystem", "sistema de arquivos"),
    ("file system", "sistema de arquivos"),
    ("database", "banco de dados"),
    ("databases", "bancos de dados"),
    ("server", "servidor"),
    ("servers", "servidores"),
    ("client", "cliente"),
    ("file", "arquivo"),
    ("files", "arquivos"),
    ("search", "busca"),
    ("tool", "ferramenta"),
    ("tools", "ferramentas"),
    ("integration", "integração"),
    ("connector", "conector"),
    ("service", "serviço"),
    ("services", "serviços"),
    ("manager", "gerenciador"),
    ("management", "gerenciamento"),
    ("handler", "manipulador"),
    ("provider", "provedor"),
    ("access", "acesso"),
    ("retrieval", "recuperação"),
    ("operations", "operações"),
    ("content", "conteúdo"),
    ("platform", "plataforma"),
    ("data", "dados"),
    ("cloud", "nuvem"),
    ("storage", "armazenamento"),
    ("security", "segurança"),
    ("authentication", "autenticação"),
    ("monitoring", "monitoramento"),
    ("analytics", "análise"),
    ("deployment", "implantação"),
    ("configuration", "configuração"),
    ("development", "desenvolvimento"),
    ("productivity", "produtividade"),
    ("workflow", "fluxo de trabalho"),
    ("automation", "automação"),
    ("notification", "notificação"),
    ("communication", "comunicação"),
    ("collaboration", "colaboração"),
    ("repository", "repositório"),
    ("processing", "processamento"),
    ("generation", "geração"),
    ("conversion", "conversão"),
    ("validation", "validação"),
    ("browser", "navegador"),
    ("agent", "agente"),
    ("agents", "agentes"),
    ("autonomous", "autônomo"),
    ("assistant", "assistente"),
    ("framework", "framework"),
    ("library", "biblioteca"),
    ("research", "pesquisa"),
)


def default_heuristics(kind: EntryKind = EntryKind.MCP_SERVER) -> HeuristicTables:
    if kind is EntryKind.AI_AGENT:
        return HeuristicTables(
            kind=kind,
            kind_label="AI agent",
            positive_keywords=("agent", "agents", "autonomous", "llm", "assistant", "gpt"),
            negative_keywords=(*_NEGATIVE_KEYWORDS, "course", "paper list"),
            strong_positive_markers=("ai agent", "ai-agent", "autonomous agent", "multi-agent"),
            official_owners=frozenset({"microsoft", "openai", "langchain-ai", "anthropics"}),
            base_category="AI Agent",
            tag_rules=_SHARED_TAG_RULES,
            category_rules=_AGENT_CATEGORY_RULES,
            baseline_tags=("ai", "agent", "automation"),
        )
    return HeuristicTables(
        kind=kind,
        kind_label="MCP server",
        positive_keywords=(
            "mcp",
            "model context protocol",
            "claude",
            "anthropic",
            "server",
            "tool",
            "integration",
            "plugin",
        ),
        negative_keywords=_NEGATIVE_KEYWORDS,
        strong_positive_markers=("mcp-server", "mcp server", "modelcontextprotocol"),
        official_owners=frozenset({"anthropics", "modelcontextprotocol"}),
        base_category="MCP Server",
        tag_rules=_SHARED_TAG_RULES,
        category_rules=_MCP_CATEGORY_RULES,
        baseline_tags=("mcp", "server", "integration"),
    )


def default_localization(kind: EntryKind = EntryKind.MCP_SERVER) -> LocalizationTables:
    if kind is EntryKind.AI_AGENT:
        return LocalizationTables(
            language="pt",
            kind_marker="agente de ia",
            kind_prefix="Agente de IA: {text}",
            fallback_template="Agente de IA para {name}, sistema inteligente para automação",
            dictionary=_PT_DICTIONARY,
        )
    return LocalizationTables(
        language="pt",
        kind_marker="servidor mcp",
        kind_prefix="Servidor MCP para {text}",
        fallback_template="Servidor MCP para {name}",
        dictionary=_PT_DICTIONARY,
    )


def default_queries(kind: EntryKind = EntryKind.MCP_SERVER) -> tuple[str, ...]:
    if kind is EntryKind.AI_AGENT:
        return (
            "ai agent framework",
            "autonomous agent",
            "multi-agent",
            "llm agent",
        )
    return (
        "mcp server",
        "model context protocol server",
        "mcp-server",
        '"mcp server"',
        "anthropic mcp",
        "claude mcp server",
    )
