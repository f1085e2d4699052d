import pytest

from reqbridge.application.use_cases.emit_client_code import CodeEmitter, script_literal
from reqbridge.domain.errors import ConfigurationError
from tests.unit._decode_cases import DECODE_CASES


def test_routine_embeds_literals_in_order():
    code = CodeEmitter().emit("post", "https://api.test/items", [("X-A", "1"), ("X-A", "2")], {"n": 1})
    assert code.startswith("async function reqbridgeRequest() {")
    assert 'xhr.open("POST", "https://api.test/items", true);' in code
    assert 'var headers = [["X-A","1"],["X-A","2"],["Content-Type","application/json"]];' in code
    assert 'xhr.send("{\\"n\\":1}");' in code


def test_routine_uses_same_decode_rule():
    code = CodeEmitter().emit("GET", "https://api.test")
    assert 'contentType.indexOf("application/json") !== -1' in code
    assert "JSON.parse(raw)" in code
    assert 'kind: "decode"' in code
    assert 'kind: "transport"' in code
    assert "xhr.send(null);" in code


def test_literals_cannot_break_out_of_a_script_element():
    code = CodeEmitter().emit("GET", "https://x.test/</script><script>alert(1)</script>", {"X": "'; alert(1); '"})
    assert "</script>" not in code
    assert "\\u003c/script\\u003e" in code
    assert "\"'; alert(1); '\"" in code


def test_script_literal_escapes_html_sensitive_characters():
    assert script_literal("a<b>&c") == '"a\\u003cb\\u003e\\u0026c"'


def test_options_map_to_xhr_properties():
    code = CodeEmitter().emit("GET", "https://api.test", options={"timeout": 2.5, "with_credentials": True, "verify": False})
    assert "xhr.timeout = 2500;" in code
    assert "xhr.withCredentials = true;" in code
    assert "verify" not in code


def test_binary_body_is_base64_embedded():
    code = CodeEmitter().emit("PUT", "https://api.test", body=b"\xff\x00")
    assert 'Uint8Array.from(atob("/wA="), ' in code


def test_function_name_must_be_an_identifier():
    assert CodeEmitter("fetchUser").emit("GET", "/u").startswith("async function fetchUser()")
    with pytest.raises(ConfigurationError):
        CodeEmitter("fetch user(){}")


@pytest.mark.parametrize("headers,content,routine", [c[1:] for c in DECODE_CASES], ids=[c[0] for c in DECODE_CASES])
def test_routine_has_the_branch_each_decode_case_takes(headers, content, routine):
    code = CodeEmitter().emit("GET", "https://api.test")
    outcome, _ = routine
    assert 'xhr.getResponseHeader("Content-Type")' in code
    if outcome == "reject":
        assert 'reject({kind: "decode"' in code
    else:
        assert "resolve({status: xhr.status" in code
    assert 'if (raw.trim() === "") {' in code
