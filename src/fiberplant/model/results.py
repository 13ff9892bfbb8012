#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Estados de resultado de una operación de edición
RESULT_OK = 'ok'
RESULT_NOT_FOUND = 'not_found'
RESULT_NOT_CONFIRMED = 'not_confirmed'
RESULT_INVALID = 'invalid'


class EditResult:
    """Resultado de una operación del editor o del motor de empalmes.

    Es verdadero sólo si el estado es 'ok' y se desempaqueta como
    ``(éxito, mensaje)``, igual que las tuplas del resto del modelo.
    """

    def __init__(self, status, message, warnings=None, data=None):
        self.status = status
        self.message = message
        self.warnings = list(warnings or [])
        self.data = data

    @classmethod
    def ok(cls, message, warnings=None, data=None):
        return cls(RESULT_OK, message, warnings, data)

    @classmethod
    def not_found(cls, message):
        return cls(RESULT_NOT_FOUND, message)

    @classmethod
    def not_confirmed(cls, message):
        return cls(RESULT_NOT_CONFIRMED, message)

    @classmethod
    def invalid(cls, message):
        return cls(RESULT_INVALID, message)

    @property
    def success(self):
        return self.status == RESULT_OK

    @property
    def is_not_found(self):
        return self.status == RESULT_NOT_FOUND

    def add_warning(self, code, text):
        self.warnings.append({'code': code, 'message': text})

    def has_warning(self, code):
        return any(w['code'] == code for w in self.warnings)

    def __bool__(self):
        return self.success

    def __iter__(self):
        yield self.success
        yield self.message

    def __repr__(self):
        return f"EditResult({self.status!r}, {self.message!r}, warnings={len(self.warnings)})"
