"""Unit tests for the signal detector catalog"""

from dealshield.domain.signals import DETECTORS, MessageFields


def _fire(code: str, text: str):
    detector = next(d for d in DETECTORS if d.code == code)
    return detector.match(text, MessageFields.from_text(text))


def test_catalog_order_and_weights():
    """Test the catalog is evaluated in a fixed order with fixed points"""
    assert [(d.code, d.points) for d in DETECTORS] == [
        ("urgency", 12),
        ("secrecy", 18),
        ("advance_fee", 28),
        ("payment_change", 30),
        ("shortened_link", 20),
        ("crypto_only", 16),
        ("missing_amount", 10),
        ("missing_deadline", 6),
    ]


def test_every_detector_recommends_actions():
    """Test each detector contributes at least one plan action"""
    assert all(d.actions for d in DETECTORS)


def test_urgency_trigger_phrases_verbatim_and_unique():
    """Test trigger phrases keep the text's casing and collapse repeats"""
    assert _fire("urgency", "URGENT! pay today, urgent, asap") == ["URGENT", "today", "asap"]


def test_urgency_requires_whole_words():
    """Test 'rush' inside another word does not fire"""
    assert _fire("urgency", "Please brush up the draft") is None


def test_secrecy_accepts_both_apostrophes():
    """Test straight and typographic apostrophes"""
    assert _fire("secrecy", "Don't tell your manager") == ["Don't tell"]
    assert _fire("secrecy", "Don’t tell anyone") == ["Don’t tell"]
    assert _fire("secrecy", "this stays between us") is None


def test_advance_fee_vocabulary():
    """Test pay-first phrasing"""
    assert _fire("advance_fee", "a small processing fee is required") == ["processing fee"]
    assert _fire("advance_fee", "To start, pay the deposit") == ["To start, pay"]


def test_payment_change_vocabulary():
    """Test payment details change phrasing"""
    assert _fire("payment_change", "Use our updated payment details") == ["updated payment details"]
    assert _fire("payment_change", "Same account as last time") is None


def test_shortened_link_uses_extracted_links():
    """Test shortener detection is host based"""
    assert _fire("shortened_link", "Confirm here: bit.ly/pay-confirm") == ["bit.ly/pay-confirm"]
    assert _fire("shortened_link", "Join at https://chat.com/room") is None


def test_crypto_only_vocabulary():
    """Test payment rail restriction phrasing"""
    assert _fire("crypto_only", "USDT only, sorry") == ["USDT only"]
    assert _fire("crypto_only", "We accept crypto and cards") is None


def test_missing_field_detectors_fire_on_absence_without_phrases():
    """Test absence detectors carry no trigger phrases"""
    assert _fire("missing_amount", "no numbers here") == []
    assert _fire("missing_amount", "budget $500") is None
    assert _fire("missing_deadline", "no dates here") == []
    assert _fire("missing_deadline", "done in 3 weeks") is None


def test_message_fields_from_text():
    """Test extractor outputs are bundled for the detectors"""
    fields = MessageFields.from_text("Budget $1,200 in 10 days, see bit.ly/x")
    assert fields.amount == "$1,200"
    assert fields.deadline == "in 10 days"
    assert fields.links == ["bit.ly/x"]


def test_urgency_inflected_forms():
    """Test suffixed forms fire while the match still starts on a word"""
    assert _fire("urgency", "Please pay urgently") == ["urgently"]
    assert _fire("urgency", "Sorry this is rushed") == ["rushed"]


def test_secrecy_inflected_forms():
    """Test 'confidentially' counts as a secrecy request"""
    assert _fire("secrecy", "This is confidentially arranged") == ["confidentially"]


def test_advance_fee_plural_forms():
    """Test plural fee wording"""
    assert _fire("advance_fee", "There are advance fees to cover") == ["advance fees"]


def test_payment_change_plural_forms():
    """Test plural account wording"""
    assert _fire("payment_change", "We opened new accounts last week") == ["new accounts"]


def test_crypto_only_full_word_forms():
    """Test 'cryptocurrency' in both restriction phrasings"""
    assert _fire("crypto_only", "We only accept cryptocurrency.") == ["only accept cryptocurrency"]
    assert _fire("crypto_only", "Cryptocurrency only, no cards") == ["Cryptocurrency only"]
