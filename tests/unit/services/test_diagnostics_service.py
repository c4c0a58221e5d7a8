from vpfootprint.config import Settings
from vpfootprint.services.diagnostics_service import DiagnosticsService
from tests.factories import make_viewport

def test_report_contains_matrices_and_sample_corner():
    svc = DiagnosticsService(settings=Settings(matrix_precision=2))
    txt = svc.transformation_diagnostics(make_viewport(viewport_id="7", layout_name="C-101", view_target=(10.0, 0.0, 0.0)))
    assert "C-101:7" in txt
    assert "Hoja→Cámara: [1.00,0.00,0.00,0.00]" in txt
    assert "Cámara→Mundo: [1.00,0.00,0.00,10.00]" in txt
    assert "Hoja: (5.00, 5.00, 0.00)" in txt
    assert "→ Mundo: (15.00, 5.00, 0.00)" in txt

def test_null_viewport_reported_as_text():
    assert DiagnosticsService().transformation_diagnostics(None) == "Viewport nulo"

def test_failure_reported_inside_text():
    txt = DiagnosticsService().transformation_diagnostics(make_viewport(custom_scale=0.0))
    assert txt.startswith("Error obteniendo diagnóstico")
