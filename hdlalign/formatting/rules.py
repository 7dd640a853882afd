"""Default alignment rules for hdlalign."""

from __future__ import annotations

from typing import Callable, Dict

from hdlalign.config import AlignConfig


class DefaultAlignRules:
    """Column presets selectable by name."""

    @classmethod
    def standard(cls) -> AlignConfig:
        """Standard column table."""
        return AlignConfig()

    @classmethod
    def compact(cls) -> AlignConfig:
        """Narrow columns for short identifiers and small terminals."""
        return AlignConfig(
            port_num1=4,
            port_num2=12,
            port_num3=20,
            port_num4=32,
            port_num5=56,
            signal_num1=4,
            signal_num2=12,
            signal_num3=20,
            signal_num4=32,
            signal_num5=56,
            param_num1=4,
            param_num2=16,
            param_num3=36,
            param_num4=56,
            assign_num1=4,
            assign_num2=12,
            assign_num3=0,
            inst_param_value_col=40,
            inst_port_value_col=40,
            array_num1=4,
            array_num2=12,
            array_num3=20,
            array_num4=32,
            array_num5=44,
            array_num6=56,
            upbound=1,
            lowbound=1,
        )

    @classmethod
    def wide(cls) -> AlignConfig:
        """Generous columns for long, hierarchical names."""
        return AlignConfig(
            port_num1=4,
            port_num2=20,
            port_num3=32,
            port_num4=64,
            port_num5=100,
            signal_num1=4,
            signal_num2=20,
            signal_num3=32,
            signal_num4=64,
            signal_num5=100,
            param_num1=4,
            param_num2=32,
            param_num3=64,
            param_num4=100,
            assign_num1=4,
            assign_num2=16,
            assign_num3=48,
            inst_param_value_col=72,
            inst_port_value_col=72,
            array_num1=4,
            array_num2=20,
            array_num3=32,
            array_num4=64,
            array_num5=80,
            array_num6=100,
            upbound=3,
            lowbound=3,
        )

    @classmethod
    def styles(cls) -> Dict[str, Callable[[], AlignConfig]]:
        return {"standard": cls.standard, "compact": cls.compact, "wide": cls.wide}

    @classmethod
    def by_name(cls, name: str) -> AlignConfig:
        try:
            return cls.styles()[name]()
        except KeyError:
            raise ValueError(f"Unknown alignment style '{name}'") from None
