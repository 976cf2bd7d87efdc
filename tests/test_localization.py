import os
import json
import pytest
from unittest.mock import patch, mock_open
from tubebatch.localization import Translator, LOCALES_DIR, available_languages, merge_catalogues

@pytest.fixture
def mock_en_locale():
    """Fixture to mock the English locale file."""
    locale_data = {
        "batch": {
            "row_start": "Processing row {position}: {label}",
            "done": "Batch finished."
        }
    }
    return json.dumps(locale_data)

def _flatten(catalogue, prefix=""):
    keys = set()
    for name, value in catalogue.items():
        path = f"{prefix}{name}"
        if isinstance(value, dict):
            keys |= _flatten(value, path + ".")
        else:
            keys.add(path)
    return keys

def test_translator_get_retrieves_and_formats_key(mock_en_locale):
    with patch('builtins.open', mock_open(read_data=mock_en_locale)):
        with patch('os.path.exists', return_value=True):
            translator = Translator(language='en')

            assert translator.get('batch.done') == "Batch finished."
            assert translator.get('batch.row_start', position=3, label="Intro") == "Processing row 3: Intro"

def test_translator_returns_key_when_missing_or_not_a_leaf(mock_en_locale):
    with patch('builtins.open', mock_open(read_data=mock_en_locale)):
        with patch('os.path.exists', return_value=True):
            translator = Translator(language='en')

            assert translator.get('batch.unknown') == 'batch.unknown'
            assert translator.get('batch.done.deeper') == 'batch.done.deeper'

def test_translator_returns_key_when_format_argument_missing(mock_en_locale):
    with patch('builtins.open', mock_open(read_data=mock_en_locale)):
        with patch('os.path.exists', return_value=True):
            translator = Translator(language='en')

            assert translator.get('batch.row_start', position=1) == 'batch.row_start'

def test_translator_falls_back_to_english(mock_en_locale):
    def mock_exists(path):
        return not path.endswith('fr.json')

    with patch('os.path.exists', side_effect=mock_exists):
        with patch('builtins.open', mock_open(read_data=mock_en_locale)):
            translator = Translator(language='fr')
            assert translator.language == 'en'
            assert translator.get('batch.done') == "Batch finished."

def test_translator_without_any_catalogue():
    with patch('os.path.exists', return_value=False):
        translator = Translator(language='fr')
        assert translator.translations == {}
        assert translator.get('batch.done') == 'batch.done'

def test_translator_handles_invalid_json():
    with patch('os.path.exists', return_value=True):
        with patch('builtins.open', mock_open(read_data="{invalid_json}")):
            translator = Translator(language='en')
            assert translator.translations == {}

def test_shipped_catalogues_cover_the_same_keys():
    catalogues = {}
    for language in ('en', 'es'):
        with open(os.path.join(LOCALES_DIR, f"{language}.json"), encoding='utf-8') as f:
            catalogues[language] = _flatten(json.load(f))
    assert catalogues['en'] == catalogues['es']
    assert 'progress.record_failed' in catalogues['en']

def test_available_languages_lists_shipped_catalogues():
    assert available_languages() == ['en', 'es']

def test_partial_translation_falls_back_per_message():
    catalogues = {
        'en.json': json.dumps({"batch": {"done": "Batch finished.", "row_skipped": "Skipped {label}"}}),
        'es.json': json.dumps({"batch": {"done": "Lote terminado."}}),
    }

    def fake_open(path, *args, **kwargs):
        return mock_open(read_data=catalogues[os.path.basename(path)])()

    with patch('os.path.exists', return_value=True):
        with patch('builtins.open', side_effect=fake_open):
            translator = Translator(language='es')

    assert translator.language == 'es'
    assert translator.get('batch.done') == "Lote terminado."
    assert translator.get('batch.row_skipped', label="A") == "Skipped A"

def test_merge_catalogues_is_nested_and_leaves_inputs_alone():
    base = {"a": {"x": "1", "y": "2"}, "b": "3"}
    override = {"a": {"y": "two"}}

    assert merge_catalogues(base, override) == {"a": {"x": "1", "y": "two"}, "b": "3"}
    assert base == {"a": {"x": "1", "y": "2"}, "b": "3"}
