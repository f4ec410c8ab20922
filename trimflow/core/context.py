from dataclasses import dataclass
from typing import Dict, Optional

from trimflow.core.translations import DEFAULT_LANGUAGE, MESSAGES


class Translator:
    """Lookup de textos por chave; cai para o idioma padrão e depois para a própria chave."""

    def __init__(self, language: str = DEFAULT_LANGUAGE, messages: Optional[Dict[str, Dict[str, str]]] = None):
        self.messages = messages if messages is not None else MESSAGES
        self.language = language if language in self.messages else DEFAULT_LANGUAGE

    def __call__(self, key: str) -> str:
        return self.t(key)

    def t(self, key: str) -> str:
        catalog = self.messages.get(self.language, {})
        if key in catalog:
            return catalog[key]
        return self.messages.get(DEFAULT_LANGUAGE, {}).get(key, key)


@dataclass
class SessionContext:
    """Usuário logado e barbearia atual, passados explicitamente aos controllers."""

    barbershop_id: str
    user_id: Optional[str] = None
    access_token: Optional[str] = None
    language: str = DEFAULT_LANGUAGE

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def translator(self) -> Translator:
        return Translator(self.language)
