"""Cliente HTTP para a API XML do IntelliSOURCE (PowerPortal)"""

import logging
from typing import Any, Callable, Dict, Optional

import requests

from config import Settings, get_settings
from models import EnrollmentResult, SchedulingResult, ValidationResult
from xml_builder import XmlBuildError, build
from xml_normalizers import normalize_enrollment, normalize_scheduling, normalize_validation
from xml_parser import XmlParseError, parse
from xml_validator import validate_xml

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Falha numa chamada à API (transporte, HTTP ou resposta ilegível)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class IntelliSourceClient:
    """Constrói os pedidos XML, envia-os e normaliza as respostas"""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

    def validate_account(self, account_number: str, zip_code: str) -> ValidationResult:
        """Valida o número de conta e o código postal do cliente"""
        payload = {
            'caNo': account_number,
            'zip': zip_code,
        }
        return self._call('validate', payload, normalize_validation)

    def get_schedule_slots(self, account_number: str, start_date: str,
                           equipment: Optional[Dict[str, Any]] = None) -> SchedulingResult:
        """Obtém as janelas de instalação disponíveis a partir de start_date"""
        payload: Dict[str, Any] = {
            'caNo': account_number,
            'start_date': start_date,
        }
        if equipment:
            payload['equipment'] = equipment
        return self._call('schedule', payload, normalize_scheduling)

    def enroll(self, form_data: Dict[str, Any]) -> EnrollmentResult:
        """Submete a inscrição no programa"""
        return self._call('enroll', {'enrollment': form_data}, normalize_enrollment)

    def book_appointment(self, fsr: str, ca_no: str, schedule_date: str, schedule_time: str) -> EnrollmentResult:
        """Marca a instalação numa janela devolvida por get_schedule_slots"""
        payload = {
            'fsr': fsr,
            'caNo': ca_no,
            'schedule_date': schedule_date,
            'schedule_time': schedule_time,
        }
        return self._call('book', payload, normalize_enrollment)

    def _call(self, action: str, payload: Dict[str, Any], normalizer: Callable[[Any], Any]):
        url = f"{self.settings.api_url}/{action}"

        try:
            request_xml = build(payload)
        except XmlBuildError as e:
            logger.error(f"✗ Could not build {action} request: {e}")
            raise ApiError(f"Invalid {action} request: {str(e)}") from e

        if self.settings.schema_path:
            is_valid, error_message = validate_xml(request_xml, self.settings.schema_path)
            if not is_valid:
                logger.error(f"✗ {action} request failed validation: {error_message}")
                raise ApiError(f"Invalid {action} request: {error_message}")

        headers = {'Content-Type': 'application/xml; charset=UTF-8'}
        if self.settings.api_key:
            headers['X-API-Key'] = self.settings.api_key

        logger.info(f"Calling IntelliSOURCE {action}: {url}")
        try:
            response = self.session.post(
                url,
                data=request_xml.encode('utf-8'),
                headers=headers,
                timeout=self.settings.timeout
            )
        except requests.RequestException as e:
            logger.error(f"✗ IntelliSOURCE {action} request failed: {e}")
            raise ApiError(f"API call failed: {str(e)}") from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"⚠ IntelliSOURCE {action} returned status {response.status_code}: {response.text[:200]}")
            raise ApiError(f"API call failed with status {response.status_code}", response.status_code)

        try:
            data = parse(response.content)
        except XmlParseError as e:
            logger.error(f"✗ IntelliSOURCE {action} returned invalid XML: {e}")
            raise ApiError(f"API call failed: {str(e)}", response.status_code) from e

        logger.info(f"✓ IntelliSOURCE {action} response parsed")
        return normalizer(data)
