from modelos import PlanMontaje, SolicitudMontaje


class BaseModo:
    def planificar(self, solicitud: SolicitudMontaje) -> PlanMontaje:
        """
        Debe devolver un ``PlanMontaje`` con páginas y colocaciones en puntos,
        listo para :func:`render_pdf.renderizar_pdf`. No dibuja nada.
        """
        raise NotImplementedError()
