"""
Word inflection service backed by the ``inflection`` library.
"""

import inflection


class Inflector:
    """Converts words between singular and plural, and between separated and camel-cased forms.

    Registered in the container under ``CoreServiceProvider.INFLECTOR``. A
    service provider registered during bootstrap can replace it with a
    subclass that knows domain-specific irregular words.
    """

    def camelize(self, word: str, uppercase_first_letter: bool = True) -> str:
        """Camel-case a word, treating ``_`` and ``-`` as separators.

        Example::

            inflector.camelize("user-accounts")        # "UserAccounts"
            inflector.camelize("user_account", False)  # "userAccount"
        """
        return inflection.camelize(word.replace("-", "_"), uppercase_first_letter)

    def singularize(self, word: str) -> str:
        return inflection.singularize(word)

    def pluralize(self, word: str) -> str:
        return inflection.pluralize(word)

    def underscore(self, word: str) -> str:
        """Turn a camel-cased word into its snake_case form."""
        return inflection.underscore(word)
