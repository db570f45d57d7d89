"""
Normalização das respostas do IntelliSOURCE (validação, inscrição, agendamento)

As funções normalize_* recebem a estrutura devolvida por xml_parser.parse e
nunca levantam exceções: campos em falta ou com formato inesperado ficam com
o valor por omissão ('', False, []).
"""

from typing import Any, Dict, Mapping, Union

from models import EnrollmentResult, ScheduleSlot, SchedulingResult, ValidationResult
from xml_parser import GenericNode, as_list, parse


MISSING = object()


def first_of(data: Any, *keys: str, default: Any = '') -> Any:
    """Devolve o valor da primeira chave presente (grafias alternativas do mesmo campo)"""
    if not isinstance(data, Mapping):
        return default
    for key in keys:
        value = data.get(key, MISSING)
        if value is not MISSING and value is not None:
            return value
    return default


def _as_mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def normalize_validation(data: GenericNode) -> ValidationResult:
    """
    Normaliza a resposta de validação de conta

    'valid' só é True quando a flag do fornecedor é exatamente 'Y'.
    """
    data = _as_mapping(data)
    result = ValidationResult(raw=data)

    if 'validation' in data:
        validation = _as_mapping(data['validation'])
        result.valid = first_of(validation, 'valid', default='N') == 'Y'
        result.error_cd = first_of(validation, 'error_cd', 'errorCode')
        result.error_message = first_of(validation, 'error_message', 'errorMessage')

        if 'customer' in validation:
            result.customer = validation['customer']

    # Nós de erro diretamente na raiz
    error_cd = first_of(data, 'error_cd', 'errorCode', default=MISSING)
    if error_cd is not MISSING:
        result.error_cd = error_cd
    error_message = first_of(data, 'error_message', 'errorMessage', default=MISSING)
    if error_message is not MISSING:
        result.error_message = error_message

    return result


def normalize_enrollment(data: GenericNode) -> EnrollmentResult:
    """
    Normaliza a resposta de inscrição

    'success' é derivado: status 'success' ou algum identificador de
    confirmação preenchido.
    """
    data = _as_mapping(data)
    result = EnrollmentResult(raw=data)

    if 'enrollment' in data:
        enrollment = _as_mapping(data['enrollment'])
        result.confirmation_no = first_of(enrollment, 'confirmation_no', 'confirmationNumber')
        result.caNo = first_of(enrollment, 'caNo', 'CA_NO')
        result.error_cd = first_of(enrollment, 'error_cd', 'errorCode')
        result.error_message = first_of(enrollment, 'error_message', 'errorMessage')
        result.success = (
            first_of(enrollment, 'status') == 'success'
            or bool(result.confirmation_no)
            or bool(result.caNo)
        )

    confirmation_no = first_of(data, 'confirmation_no', 'confirmationNumber')
    if confirmation_no:
        result.confirmation_no = confirmation_no
        result.success = True
    ca_no = first_of(data, 'caNo', 'CA_NO')
    if ca_no:
        result.caNo = ca_no
        result.success = True

    return result


def normalize_scheduling(data: GenericNode) -> SchedulingResult:
    """
    Normaliza a resposta de agendamento

    Uma única <slot> chega do parser como dict e não como lista;
    as_list trata os dois casos. Sem <available> a janela conta como livre.
    """
    data = _as_mapping(data)
    result = SchedulingResult(raw=data)

    if 'scheduling' in data:
        scheduling = _as_mapping(data['scheduling'])
        result.fsr = first_of(scheduling, 'fsr', 'FSR')
        result.caNo = first_of(scheduling, 'caNo', 'CA_NO')

        slots = _as_mapping(scheduling.get('slots')).get('slot')
        for slot in as_list(slots):
            slot = _as_mapping(slot)
            result.slots.append(ScheduleSlot(
                date=first_of(slot, 'date'),
                time=first_of(slot, 'time'),
                available=first_of(slot, 'available', default='Y') == 'Y',
            ))

    fsr = first_of(data, 'fsr', 'FSR', default=MISSING)
    if fsr is not MISSING:
        result.fsr = fsr
    ca_no = first_of(data, 'caNo', 'CA_NO', default=MISSING)
    if ca_no is not MISSING:
        result.caNo = ca_no

    return result


def parse_validation(xml_text: Union[str, bytes]) -> ValidationResult:
    """Faz parse e normaliza; só o parse pode levantar XmlParseError"""
    return normalize_validation(parse(xml_text))


def parse_enrollment(xml_text: Union[str, bytes]) -> EnrollmentResult:
    return normalize_enrollment(parse(xml_text))


def parse_scheduling(xml_text: Union[str, bytes]) -> SchedulingResult:
    return normalize_scheduling(parse(xml_text))
