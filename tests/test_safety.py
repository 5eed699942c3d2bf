import pytest

from pwcheck import safety
from pwcheck.errors import SecurityInvariantViolation
from pwcheck.safety import OutputSafeText, SecretGuard


def test_output_safe_text_cannot_be_built_directly():
    with pytest.raises(TypeError):
        OutputSafeText("anything")


def test_reveal_accepts_unrelated_text():
    text = SecretGuard("Secret99").reveal("password")
    assert isinstance(text, OutputSafeText)
    assert text == "password"


def test_reveal_rejects_text_containing_the_secret():
    guard = SecretGuard("Secret99")
    with pytest.raises(SecurityInvariantViolation):
        guard.reveal("my-secret99-x")


def test_sanctioned_echo_is_allowed():
    text = SecretGuard("Dragon").reveal("dragon", sanctioned=True)
    assert text == "dragon"
    assert text.origin == "echo"


def test_mask_blanks_every_occurrence():
    guard = SecretGuard("dragon")
    assert guard.mask("dragon123") == "******123"
    assert guard.mask("123DRAGONdragon") == "123************"
    assert guard.mask("qwerty") == "qwerty"


def test_format_checks_interpolated_values_only():
    guard = SecretGuard("ving")
    # the fixed template may contain the secret by coincidence
    text = guard.format("Removing the character {removed}", removed="'x' at position 2")
    assert text == "Removing the character 'x' at position 2"
    guard.verify({"detail": text})

    with pytest.raises(SecurityInvariantViolation):
        guard.format("Value {value}", value="saving")


def test_verify_walks_nested_payloads():
    guard = SecretGuard("hunter2")
    payload = {"a": [guard.reveal("ok")], "b": {"c": "plain"}, "d": 3}
    assert guard.verify(payload) is payload

    tampered = OutputSafeText("hunter2!", _token=safety._GUARD_TOKEN)
    with pytest.raises(SecurityInvariantViolation):
        guard.verify({"nested": {"list": [tampered]}})


def test_verify_serialized_covers_keys_labels_and_numbers():
    payload = {"label": "Very Weak", "size": 2048, "done": True}
    assert SecretGuard("Strong").verify_serialized(payload) is payload

    for secret in ("Weak", "label", "2048", "true"):
        with pytest.raises(SecurityInvariantViolation):
            SecretGuard(secret).verify_serialized(payload)


def test_verify_serialized_sees_escaped_characters():
    payload = {"note": 'say "hi"'}
    with pytest.raises(SecurityInvariantViolation):
        SecretGuard('"hi"').verify_serialized(payload)


def test_guard_repr_hides_secret():
    assert "hunter2" not in repr(SecretGuard("hunter2"))
