"""Answer generator interface."""

from abc import ABC, abstractmethod


class GeneratorInterface(ABC):
    """Turns an assembled prompt into answer text.

    Failures raise GenerationFailure.
    """

    @abstractmethod
    def generate(self, prompt: str) -> str:
        pass

    def close(self) -> None:
        """Release connection resources."""
