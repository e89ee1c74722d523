"""
Medical code generator for NPE Claims Analytics.

Generates demo codes for each supported code system.
"""

from typing import Any

from npe_claims.config.models import MedicalCodeConfig
from npe_claims.domain.dimensions import MedicalCode
from npe_claims.domain.enums import CodeSystem
from npe_claims.generators.base import BaseGenerator
from npe_claims.generators.id_generator import IDGenerator


class MedicalCodeGenerator(BaseGenerator[MedicalCode]):
    """
    Generates medical codes as the cross product of code systems and
    sequence numbers.
    """

    TITLE_TEMPLATES = {
        CodeSystem.ICD10: "ICD10 demo diagnosis {seq}",
        CodeSystem.NCSP: "NCSP demo procedure {seq}",
        CodeSystem.ICPC2: "ICPC2 demo primary care code {seq}",
        CodeSystem.OTHER: "Other demo code {seq}",
    }

    def __init__(
        self,
        rng,
        id_generator: IDGenerator,
        config: MedicalCodeConfig | None = None,
    ):
        """
        Initialize the medical code generator.

        Args:
            rng: NumPy random number generator
            id_generator: ID generator
            config: Optional medical code configuration
        """
        super().__init__(rng)
        self.id_generator = id_generator
        self.config = config or MedicalCodeConfig()

    @staticmethod
    def format_code(code_system: CodeSystem, seq: int) -> str:
        """
        Build the code string for a system and sequence number.

        ICD10 codes carry a check digit of (seq * 7) mod 10 after the dot.
        """
        if code_system == CodeSystem.ICD10:
            return f"I{seq:02d}.{(seq * 7) % 10}"
        if code_system == CodeSystem.NCSP:
            return f"N{seq:03d}"
        if code_system == CodeSystem.ICPC2:
            return f"P{seq:02d}"
        return f"O{seq:03d}"

    def generate(self, code_system: CodeSystem, seq: int, **kwargs: Any) -> MedicalCode:
        """
        Generate one medical code.

        Args:
            code_system: Code system
            seq: 1-based sequence number within the system

        Returns:
            MedicalCode with the next identity value
        """
        return MedicalCode(
            medical_code_id=self.id_generator.next_id("medical_codes"),
            code_system=code_system,
            code=self.format_code(code_system, seq),
            code_title=self.TITLE_TEMPLATES[code_system].format(seq=seq),
            active=self.bernoulli(self.config.active_probability),
        )

    def generate_all(self, codes_per_system: int) -> list[MedicalCode]:
        """
        Generate the full medical code dimension.

        Returns:
            Codes ordered by system, then sequence
        """
        return [
            self.generate(code_system=code_system, seq=seq)
            for code_system in CodeSystem
            for seq in range(1, codes_per_system + 1)
        ]
