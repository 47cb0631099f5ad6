# tests/test_smoke.py
"""
Testes de sanidade estrutural (smoke tests) do Atlas Converge.

Garantem apenas que o pacote importa e que a API pública existe.

Limites explícitos:
    - Não testar lógica de convergência
"""


def test_smoke():
    import atlas_converge

    assert set(atlas_converge.__all__) == {
        "Node",
        "PlatformRegistry",
        "RunList",
        "Runner",
        "converge",
        "platform_registry",
    }
