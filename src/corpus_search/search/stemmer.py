"""Reduced Porter-style stemmer.

Only a subset of the classic Porter rule groups is implemented (1a, 1b, 1c,
two suffixes of step 2, two of step 3, two of step 4, 5a and 5b). Every group
runs exactly once, in order, with no iteration.
"""

from __future__ import annotations


_VOWELS = frozenset("aeiou")


class ReducedPorterStemmer:
    """Stateful stemmer operating on a single lowercased word."""

    def __init__(self, word: str | None) -> None:
        self.word = (word or "").lower()
        self._flags: list[bool] = []
        self._flags_word = ""

    # --- primitives -------------------------------------------------------

    def _consonant_flags(self) -> list[bool]:
        """Consonant flag per character of the current word, computed left to right."""

        if self._flags_word != self.word:
            flags: list[bool] = []
            for i, ch in enumerate(self.word):
                if ch in _VOWELS:
                    flags.append(False)
                elif ch == "y":
                    # 'y' after a vowel behaves as a vowel
                    flags.append(i == 0 or flags[i - 1])
                else:
                    flags.append(True)
            self._flags = flags
            self._flags_word = self.word
        return self._flags

    def is_consonant(self, i: int) -> bool:
        if i < 0 or i >= len(self.word):
            return False
        return self._consonant_flags()[i]

    def measure(self) -> int:
        count = 0
        in_vowel_seq = False
        for is_consonant in self._consonant_flags():
            if not is_consonant:
                in_vowel_seq = True
            elif in_vowel_seq:
                count += 1
                in_vowel_seq = False
        return count

    def is_double_consonant(self, i: int) -> bool:
        return i > 0 and self.word[i] == self.word[i - 1] and self.is_consonant(i)

    def cvc(self, i: int) -> bool:
        return (
            i >= 2
            and self.is_consonant(i)
            and not self.is_consonant(i - 1)
            and self.is_consonant(i - 2)
            and self.word[i] not in "wxy"
        )

    def contains_vowel(self) -> bool:
        return any(not self.is_consonant(i) for i in range(len(self.word)))

    def contains_vowel_before_last(self) -> bool:
        return any(not self.is_consonant(i) for i in range(len(self.word) - 1))

    def _replace_suffix(self, suffix_len: int, replacement: str) -> None:
        self.word = self.word[: len(self.word) - suffix_len] + replacement

    # --- rule groups ------------------------------------------------------

    def step1a(self) -> None:
        if self.word.endswith("sses"):
            self._replace_suffix(4, "ss")
        elif self.word.endswith("ies"):
            self._replace_suffix(3, "i")
        elif len(self.word) > 2 and self.word.endswith("s"):
            self._replace_suffix(1, "")

    def step1b(self) -> None:
        if self.word.endswith("eed"):
            if self.measure() > 0:
                self._replace_suffix(3, "ee")
            return
        if not (self.word.endswith("ed") or self.word.endswith("ing")) or not self.contains_vowel():
            return

        self._replace_suffix(2 if self.word.endswith("ed") else 3, "")
        if self.word.endswith(("at", "bl", "iz")):
            self.word += "e"
        elif self.is_double_consonant(len(self.word) - 1):
            self._replace_suffix(1, "")
        elif self.measure() == 1 and self.cvc(len(self.word) - 1):
            self.word += "e"

    def step1c(self) -> None:
        if self.word.endswith("y") and self.contains_vowel_before_last():
            self.word = self.word[:-1] + "i"

    def step2(self) -> None:
        if self.word.endswith("ational") and self.measure() > 0:
            self._replace_suffix(7, "ate")
        elif self.word.endswith("tional") and self.measure() > 0:
            self._replace_suffix(6, "tion")

    def step3(self) -> None:
        if self.word.endswith("icate") and self.measure() > 0:
            self._replace_suffix(5, "ic")
        elif self.word.endswith("ative") and self.measure() > 0:
            self._replace_suffix(5, "")

    def step4(self) -> None:
        if self.word.endswith("ance") and self.measure() > 1:
            self._replace_suffix(4, "")
        elif self.word.endswith("ence") and self.measure() > 1:
            self._replace_suffix(4, "")

    def step5a(self) -> None:
        if not self.word.endswith("e"):
            return
        m = self.measure()
        # cvc is checked one character before the trailing 'e'
        if m > 1 or (m == 1 and not self.cvc(len(self.word) - 2)):
            self._replace_suffix(1, "")

    def step5b(self) -> None:
        last = len(self.word) - 1
        if len(self.word) > 1 and self.is_double_consonant(last) and self.measure() > 1 and self.word[last] == "l":
            self._replace_suffix(1, "")

    def stem(self) -> str:
        if not self.word:
            return ""
        self.step1a()
        self.step1b()
        self.step1c()
        self.step2()
        self.step3()
        self.step4()
        self.step5a()
        self.step5b()
        return self.word


def stem(word: str | None) -> str:
    """Return the reduced Porter stem of ``word`` (lowercased first)."""

    return ReducedPorterStemmer(word).stem()
