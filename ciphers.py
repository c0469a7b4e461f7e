"""
Cipher demo programs
Caesar and Vigenere encryption written in Chiffre itself; the host only
fills in the text and the key
"""

from typing import Callable, Dict


# Helpers shared by every cipher program. Letters are recognised by code:
# 65..90 upper case, 97..122 lower case.
_LETTER_TESTS = r"""
let isUpper = \c => ((c > 64) == (c < 91) == true) in
let isLower = \c => ((c > 96) == (c < 123) == true) in
"""

_CAESAR_BODY = r"""
let shift = \c => \i =>
  let code = charCode c in
  if isUpper code
  then shiftUpper code i
  else if isLower code
  then shiftLower code i
  else c
in
let rec shiftChar = \f => \s => \i =>
  if s == ""
  then ""
  else f (firstChar s) i # shiftChar f (remainingChars s) i
in
shiftChar shift {text} {shift}
"""

_CAESAR_ENCRYPT = r"""
let shiftUpper = \c => \i => codeChar ((((c - 65) + i) % 26) + 65) in
let shiftLower = \c => \i => codeChar ((((c - 97) + i) % 26) + 97) in
"""

_CAESAR_DECRYPT = r"""
let shiftUpper = \c => \i => codeChar ((((c - 65) - i + 26) % 26) + 65) in
let shiftLower = \c => \i => codeChar ((((c - 97) - i + 26) % 26) + 97) in
"""

# p is the whole key, cp what is left of it for the current pass
_VIGENERE_BODY = r"""
let shift = \c => \cp =>
  let code = charCode c in
  let pCode = charCode cp in
  if isUpper code
  then shiftUpper code pCode
  else if isLower code
  then shiftLower code pCode
  else c
in
let rec shiftChar = \f => \s => \p => \cp =>
  if s == ""
  then ""
  else if cp == ""
  then f (firstChar s) (firstChar p) # shiftChar f (remainingChars s) p (remainingChars p)
  else f (firstChar s) (firstChar cp) # shiftChar f (remainingChars s) p (remainingChars cp)
in
shiftChar shift {text} {key} {key}
"""

_VIGENERE_ENCRYPT = r"""
let shiftUpper = \c => \i =>
  if isUpper i
  then codeChar ((((c - 65) + (i - 65)) % 26) + 65)
  else codeChar ((((c - 65) + (i - 97)) % 26) + 65)
in
let shiftLower = \c => \i =>
  if isUpper i
  then codeChar ((((c - 97) + (i - 65)) % 26) + 97)
  else codeChar ((((c - 97) + (i - 97)) % 26) + 97)
in
"""

_VIGENERE_DECRYPT = r"""
let shiftUpper = \c => \i =>
  if isUpper i
  then codeChar ((((c - 65) - (i - 65) + 26) % 26) + 65)
  else codeChar ((((c - 65) - (i - 97) + 26) % 26) + 65)
in
let shiftLower = \c => \i =>
  if isUpper i
  then codeChar ((((c - 97) - (i - 65) + 26) % 26) + 97)
  else codeChar ((((c - 97) - (i - 97) + 26) % 26) + 97)
in
"""


def string_literal(text: str) -> str:
  """Quote text as a Chiffre string literal"""
  escaped = text.replace('\\', '\\\\').replace('"', '\\"')
  return f'"{escaped}"'


def _check_key(key: str) -> str:
  if not key:
    raise ValueError("Vigenere key must not be empty")
  if not all(c.isascii() and c.isalpha() for c in key):
    raise ValueError(f"Vigenere key must consist of ASCII letters: {key!r}")
  return key


def caesar_encrypt_program(text: str, shift: int) -> str:
  body = _CAESAR_BODY.format(text=string_literal(text), shift=shift % 26)
  return _LETTER_TESTS + _CAESAR_ENCRYPT + body


def caesar_decrypt_program(text: str, shift: int) -> str:
  body = _CAESAR_BODY.format(text=string_literal(text), shift=shift % 26)
  return _LETTER_TESTS + _CAESAR_DECRYPT + body


def vigenere_encrypt_program(text: str, key: str) -> str:
  body = _VIGENERE_BODY.format(text=string_literal(text), key=string_literal(_check_key(key)))
  return _LETTER_TESTS + _VIGENERE_ENCRYPT + body


def vigenere_decrypt_program(text: str, key: str) -> str:
  body = _VIGENERE_BODY.format(text=string_literal(text), key=string_literal(_check_key(key)))
  return _LETTER_TESTS + _VIGENERE_DECRYPT + body


# Menu code, CLI name and program generator for each demo
CIPHERS: Dict[str, Dict] = {
    "caesar-encrypt": {'menu': "CV", 'label': "Caesar encryption",
                       'program': caesar_encrypt_program, 'key_is_shift': True},
    "caesar-decrypt": {'menu': "CE", 'label': "Caesar decryption",
                       'program': caesar_decrypt_program, 'key_is_shift': True},
    "vigenere-encrypt": {'menu': "VV", 'label': "Vigenere encryption",
                         'program': vigenere_encrypt_program, 'key_is_shift': False},
    "vigenere-decrypt": {'menu': "VE", 'label': "Vigenere decryption",
                         'program': vigenere_decrypt_program, 'key_is_shift': False},
}


def cipher_program(name: str, text: str, key: str) -> str:
  """Program text for the named cipher; key is parsed as a shift for Caesar"""
  if name not in CIPHERS:
    raise ValueError(f"Unknown cipher: {name}")
  entry = CIPHERS[name]
  generate: Callable = entry['program']
  if entry['key_is_shift']:
    return generate(text, int(key))
  return generate(text, key)
