# tests/test_print_bridge.py
from fastapi.testclient import TestClient

from facturafacil.domain.services.settlement import finalize_invoice
from facturafacil.infrastructure.api.print_bridge import bridge_app, document_type_label
from facturafacil.infrastructure.external.fiscal_printer_adapter import build_print_payload

client = TestClient(bridge_app)


class TestPrintBridge:

    def test_status(self):
        response = client.get("/status")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_rejects_document_without_number(self):
        response = client.post("/print", json={"type": "sale"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "Datos de factura inválidos."}

    def test_accepts_full_and_simplified_documents(self, make_customer, make_draft, company, now):
        customer = make_customer()
        invoice = finalize_invoice(make_draft(customer), customer, company=company, now=now).invoice

        for simplified in (False, True):
            response = client.post("/print", json=build_print_payload(invoice, simplified))
            assert response.status_code == 200
            assert response.json()["success"] is True

    def test_document_type_label(self):
        assert document_type_label({"type": "return"}) == "Nota de Crédito"
        assert document_type_label({"type": "sale", "isDebtPayment": True}) == "Abono a Deuda"
        assert document_type_label({"type": "sale", "isCreditDeposit": True}) == "Depósito a Cuenta"
        assert document_type_label({"type": "sale"}) == "Factura"
