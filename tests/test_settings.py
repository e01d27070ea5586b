from http.cookiejar import CookieJar

import pytest

from serpscrape.search.errors import SearchConfigError
from serpscrape.search.settings import RESERVED_PARAMETERS, SearchSettings


def test_defaults() -> None:
    settings = SearchSettings()

    assert settings.tld == "com"
    assert settings.lang == "en"
    assert settings.num == 10
    assert settings.start == 0
    assert settings.stop is None
    assert settings.pause == 2.0
    assert settings.user_agent is None
    assert settings.include_provider_links is False
    assert settings.cookie_jar is None
    assert settings.uses_default_page_size is True


@pytest.mark.parametrize("name", RESERVED_PARAMETERS)
def test_reserved_extra_param_fails_fast(name: str) -> None:
    with pytest.raises(SearchConfigError, match=f'"{name}" is overlapping'):
        SearchSettings(extra_params={name: "x"})


def test_config_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        SearchSettings(extra_params={"q": "override"})


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"num": 0}, "num must be >= 1"),
        ({"start": -1}, "start must be >= 0"),
        ({"stop": -5}, "stop must be >= 0"),
        ({"pause": -0.1}, "pause must be >= 0"),
        ({"timeout": 0}, "timeout must be > 0"),
        ({"safe": "strict"}, "safe must be one of"),
        ({"tld": " "}, "tld must not be empty"),
        ({"tld": "co m\x01"}, "tld contains invalid characters"),
        ({"tld": "com/evil?x="}, "tld contains invalid characters"),
        ({"tld": "com\n"}, "tld contains invalid characters"),
    ],
)
def test_invalid_values_rejected(kwargs: dict, message: str) -> None:
    with pytest.raises(SearchConfigError, match=message):
        SearchSettings(**kwargs)


def test_extra_params_are_copied() -> None:
    extra = {"gl": "us"}
    settings = SearchSettings(extra_params=extra)
    extra["hl"] = "en"

    assert settings.extra_params == {"gl": "us"}


def test_replace_keeps_cookie_jar_and_revalidates() -> None:
    jar = CookieJar()
    settings = SearchSettings(cookie_jar=jar)

    updated = settings.replace(num=1, stop=1)
    assert updated.cookie_jar is jar
    assert updated.num == 1
    assert updated.stop == 1
    assert settings.num == 10

    with pytest.raises(SearchConfigError):
        settings.replace(extra_params={"start": "5"})


def test_settings_are_immutable() -> None:
    settings = SearchSettings()
    with pytest.raises(AttributeError):
        settings.num = 20  # type: ignore[misc]
