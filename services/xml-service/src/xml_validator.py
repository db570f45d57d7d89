"""Módulo para validar pedidos XML usando XML Schema Definition (XSD)"""

import os
import xmlschema
from lxml import etree
from typing import Tuple, Optional

from xml_parser import SECURE_PARSER_OPTIONS


def validate_xml(xml_content: str, schema_path: Optional[str] = None) -> Tuple[bool, Optional[str]]:
    """
    Valida XML usando XML Schema Definition (XSD)

    Sem schema configurado (ou se o ficheiro não existir) apenas verifica
    que o XML está bem formado.

    Args:
        xml_content: String XML a validar
        schema_path: Caminho do ficheiro XSD (opcional)

    Returns:
        Tuple (is_valid, error_message)
    """
    if not xml_content:
        return False, "XML content is empty or None"

    if not isinstance(xml_content, str):
        return False, f"XML content must be a string, got: {type(xml_content)}"

    # Primeiro, validar que o XML está bem formado (well-formed)
    try:
        parser = etree.XMLParser(**SECURE_PARSER_OPTIONS)
        etree.fromstring(xml_content.encode('utf-8'), parser=parser)
    except etree.XMLSyntaxError as e:
        return False, f"XML syntax error (not well-formed): {str(e)}"

    if not schema_path or not os.path.exists(schema_path):
        return True, None

    try:
        schema = xmlschema.XMLSchema(schema_path)
    except xmlschema.XMLSchemaException as e:
        return False, f"Invalid XML Schema: {str(e)}"

    # Limitar a 5 erros
    error_messages = [error.reason or str(error) for error in schema.iter_errors(xml_content)][:5]
    if error_messages:
        return False, f"XML Schema validation failed: {'; '.join(error_messages)}"

    return True, None
