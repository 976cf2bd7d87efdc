import os
import json
from tubebatch.config import T, E

LOCALES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "locales")
DEFAULT_LANGUAGE = 'en'

def available_languages():
    """Language codes with a catalogue shipped in the locales directory."""
    if not os.path.isdir(LOCALES_DIR):
        return []
    return sorted(os.path.splitext(name)[0] for name in os.listdir(LOCALES_DIR) if name.endswith(".json"))

def locale_path(language):
    return os.path.join(LOCALES_DIR, f"{language}.json")

def merge_catalogues(base, override):
    """Nested merge; messages in `override` win, sections missing from it keep `base`."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_catalogues(merged[key], value)
        else:
            merged[key] = value
    return merged

class Translator:
    """
    Message catalogue for one language, layered over the English one so a message
    missing from a partial translation is still shown in English.
    """

    def __init__(self, language=DEFAULT_LANGUAGE):
        self.language = language
        self.translations = self._load_translations()

    def _read_catalogue(self, language):
        path = locale_path(language)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            print(f"{T.FAIL}{E.FAIL} Failed to load language file {path}: {e}")
            return {}

    def _load_translations(self):
        base = self._read_catalogue(DEFAULT_LANGUAGE) or {}
        if self.language == DEFAULT_LANGUAGE:
            return base

        catalogue = self._read_catalogue(self.language)
        if catalogue is None:
            print(f"{T.WARN}{E.WARN} Language file not found for '{self.language}'. Falling back to '{DEFAULT_LANGUAGE}'.")
            self.language = DEFAULT_LANGUAGE
            return base
        return merge_catalogues(base, catalogue)

    def get(self, key, **kwargs):
        """Formats the message at a dotted key; the key itself is returned when there is none."""
        value = self.translations
        try:
            for k in key.split('.'):
                value = value[k]
            return value.format(**kwargs)
        except (KeyError, TypeError):
            return key
        except Exception as e:
            print(f"{T.WARN}    {E.WARN} Translation formatting error for key '{key}': {e}")
            return key
