"""Modelos de dados para as respostas normalizadas do IntelliSOURCE"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ScheduleSlot:
    """Janela de agendamento disponibilizada pelo fornecedor"""
    date: str = ''
    time: str = ''
    available: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date, 'time': self.time, 'available': self.available}


@dataclass
class ValidationResult:
    """Resultado da validação de conta"""
    valid: bool = False
    error_cd: Any = ''
    error_message: Any = ''
    customer: Any = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Campos canónicos por cima dos campos originais da resposta"""
        result = dict(self.raw)
        result.update({
            'valid': self.valid,
            'error_cd': self.error_cd,
            'error_message': self.error_message,
            'customer': self.customer,
        })
        return result


@dataclass
class EnrollmentResult:
    """Resultado da inscrição (ou marcação) no programa"""
    success: bool = False
    confirmation_no: Any = ''
    caNo: Any = ''
    error_cd: Any = ''
    error_message: Any = ''
    raw: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = dict(self.raw)
        result.update({
            'success': self.success,
            'confirmation_no': self.confirmation_no,
            'caNo': self.caNo,
            'error_cd': self.error_cd,
            'error_message': self.error_message,
        })
        return result


@dataclass
class SchedulingResult:
    """Janelas de agendamento para uma conta"""
    fsr: Any = ''
    caNo: Any = ''
    slots: List[ScheduleSlot] = field(default_factory=list)
    raw: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result = dict(self.raw)
        result.update({
            'fsr': self.fsr,
            'caNo': self.caNo,
            'slots': [slot.to_dict() for slot in self.slots],
        })
        return result
