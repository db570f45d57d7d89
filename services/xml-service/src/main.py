"""Servidor Flask principal do XML Service"""

import logging
from typing import Optional

from flask import Flask, Response, request, jsonify
from flask_cors import CORS

from api_client import ApiError, IntelliSourceClient
from config import get_settings
from xml_builder import XmlBuildError, build
from xml_normalizers import normalize_enrollment, normalize_scheduling, normalize_validation
from xml_parser import XmlParseError, parse
from xml_validator import validate_xml

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
)
logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app)

NORMALIZERS = {
    'validation': normalize_validation,
    'enrollment': normalize_enrollment,
    'scheduling': normalize_scheduling,
}

_client: Optional[IntelliSourceClient] = None


def get_client() -> IntelliSourceClient:
    """Cliente da API criado na primeira utilização"""
    global _client
    if _client is None:
        _client = IntelliSourceClient(settings)
    return _client


@app.route('/health', methods=['GET'])
def health():
    """Endpoint de health check"""
    return jsonify({"status": "healthy", "service": "xml-service"}), 200


@app.route('/api/parse', methods=['POST'])
def parse_xml():
    """Converte o XML do corpo do pedido na estrutura genérica"""
    try:
        data = parse(request.get_data())
    except XmlParseError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"success": True, "data": data}), 200


@app.route('/api/parse/<kind>', methods=['POST'])
def parse_response(kind: str):
    """Converte e normaliza uma resposta de validação, inscrição ou agendamento"""
    normalizer = NORMALIZERS.get(kind)
    if normalizer is None:
        return jsonify({"error": f"Unknown response type: {kind}"}), 404

    try:
        data = parse(request.get_data())
    except XmlParseError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"success": True, "data": normalizer(data).to_dict()}), 200


@app.route('/api/build', methods=['POST'])
def build_xml():
    """
    Gera um pedido XML a partir de JSON
    Body: {"data": {...}, "root_element": "request"}
    """
    body = request.get_json(silent=True)
    if not isinstance(body, dict) or not isinstance(body.get('data'), dict):
        return jsonify({"error": "data object is required"}), 400

    root_element = body.get('root_element') or 'request'
    try:
        xml_content = build(body['data'], root_element)
    except XmlBuildError as e:
        return jsonify({"error": str(e)}), 400

    if settings.schema_path:
        is_valid, error_message = validate_xml(xml_content, settings.schema_path)
        if not is_valid:
            logger.warning(f"⚠ Built XML failed validation: {error_message}")
            return jsonify({"error": error_message}), 422

    return Response(xml_content, status=200, mimetype='application/xml')


@app.route('/api/accounts/validate', methods=['POST'])
def validate_account():
    """Valida uma conta na API do IntelliSOURCE"""
    body = request.get_json(silent=True) or {}
    account_number = body.get('account_number')
    zip_code = body.get('zip_code')
    if not account_number or not zip_code:
        return jsonify({"error": "account_number and zip_code are required"}), 400

    try:
        result = get_client().validate_account(account_number, zip_code)
    except ApiError as e:
        return jsonify({"error": str(e)}), 502
    return jsonify({"success": True, "data": result.to_dict()}), 200


@app.route('/api/schedule/slots', methods=['POST'])
def schedule_slots():
    """Obtém as janelas de agendamento de uma conta"""
    body = request.get_json(silent=True) or {}
    account_number = body.get('account_number')
    start_date = body.get('start_date')
    if not account_number or not start_date:
        return jsonify({"error": "account_number and start_date are required"}), 400

    try:
        result = get_client().get_schedule_slots(account_number, start_date, body.get('equipment'))
    except ApiError as e:
        return jsonify({"error": str(e)}), 502
    return jsonify({"success": True, "data": result.to_dict()}), 200


@app.route('/api/enrollments', methods=['POST'])
def enroll():
    """Submete uma inscrição e, se houver janela escolhida, marca a instalação"""
    body = request.get_json(silent=True)
    if not isinstance(body, dict) or not isinstance(body.get('form_data'), dict):
        return jsonify({"error": "form_data object is required"}), 400

    form_data = body['form_data']
    client = get_client()
    try:
        result = client.enroll(form_data)
        logger.info(f"✓ Enrollment submitted (success: {result.success})")

        if result.success and body.get('schedule_date') and body.get('fsr'):
            ca_no = form_data.get('account_number') or result.caNo
            client.book_appointment(body['fsr'], ca_no, body['schedule_date'], body.get('schedule_time', ''))
            logger.info("✓ Appointment booked")
    except ApiError as e:
        logger.error(f"✗ Enrollment error: {e}")
        return jsonify({"error": str(e)}), 502

    return jsonify({"success": result.success, "data": result.to_dict()}), 200


if __name__ == '__main__':
    print(f"\n{'='*60}")
    print("XML Service starting...")
    print(f"{'='*60}")
    print(f"Flask API Port: {settings.api_port} (REST)")
    print(f"IntelliSOURCE API: {settings.api_url}")
    print(f"Environment: {settings.env}")
    print(f"{'='*60}\n")

    app.run(host='0.0.0.0', port=settings.api_port, debug=False, threaded=True)
