from miro_mcp.config import ServerConfig


def test_defaults():
    config = ServerConfig()
    assert config.api_base_url == "https://api.miro.com/v2"
    assert config.request_timeout == 30.0
    assert config.character_limit == 50000
    assert config.default_page_size == 20
    assert config.max_page_size == 100
    assert config.log_level == "INFO"


def test_from_env_reads_variables():
    config = ServerConfig.from_env({
        "MIRO_API_BASE_URL": "http://localhost:9000/v2/",
        "MIRO_REQUEST_TIMEOUT": "5",
        "CHARACTER_LIMIT": "1000",
        "DEFAULT_PAGE_SIZE": "10",
        "MAX_PAGE_SIZE": "50",
        "MIRO_MCP_LOG_LEVEL": "debug",
    })
    assert config.api_base_url == "http://localhost:9000/v2"
    assert config.request_timeout == 5.0
    assert config.character_limit == 1000
    assert config.default_page_size == 10
    assert config.max_page_size == 50
    assert config.log_level == "DEBUG"


def test_from_env_invalid_numbers_fall_back_to_defaults():
    config = ServerConfig.from_env({"CHARACTER_LIMIT": "lots", "DEFAULT_PAGE_SIZE": "", "MIRO_REQUEST_TIMEOUT": "x"})
    assert config.character_limit == 50000
    assert config.default_page_size == 20
    assert config.request_timeout == 30.0


def test_from_env_keeps_default_page_size_within_max():
    config = ServerConfig.from_env({"DEFAULT_PAGE_SIZE": "80", "MAX_PAGE_SIZE": "40"})
    assert config.default_page_size == 40


def test_page_size():
    config = ServerConfig()
    assert config.page_size(None) == 20
    assert config.page_size(5) == 5
    assert config.page_size(500) == 100
    assert config.page_size(0) == 1
