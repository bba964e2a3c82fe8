from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Search settings
    search_debounce_seconds: float = 0.3
    search_cache_capacity: int = 50
    search_result_limit: int = 10

    # Reference settings
    block_preview_length: int = 100
    reference_separator: str = " "

    # Template settings
    template_autosend: bool = True

    # Graph settings
    local_graph_path: str = "data/graph.json"

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
