"""
Rentadora API - Resource Catalog
=================================

The ten collections exposed by the API. Each entry is pure configuration;
adding a resource means adding a ResourceDefinition here and nothing else.

Payments: only one shape is served on /pagos (alquilerId, monto, metodo,
fecha_pago). `usuarioId` and `fecha` are documented as optional fields.
"""

from typing import Dict, Tuple

from rentadora.schemas.resource import (
    FieldSpec,
    ResourceDefinition,
    range_validator,
    reference,
    utc_timestamp,
)

USUARIOS = ResourceDefinition(
    collection="usuarios",
    path="/usuarios",
    label="Usuario",
    schema_name="Usuario",
    tag="Usuarios",
    fields=(
        FieldSpec("nombre", description="Nombre completo"),
        FieldSpec("correo", description="Correo electrónico", format="email"),
        FieldSpec("rol", description="Rol dentro de la plataforma"),
    ),
    defaults={"fechaRegistro": utc_timestamp},
)

MAQUINAS = ResourceDefinition(
    collection="maquinas",
    path="/maquinas",
    label="Máquina",
    schema_name="Maquina",
    tag="Máquinas",
    feminine=True,
    fields=(
        FieldSpec("nombre", description="Nombre de la máquina"),
        FieldSpec("descripcion", description="Descripción"),
        FieldSpec("precio", json_type="number", format="float", description="Precio de renta"),
        reference("distribuidor", "Distribuidor que provee la máquina", "id", "nombre"),
    ),
)

ALQUILERES = ResourceDefinition(
    collection="alquileres",
    path="/alquileres",
    label="Alquiler",
    schema_name="Alquiler",
    tag="Alquileres",
    fields=(
        reference("usuario", "Usuario que renta", "id"),
        reference("maquina", "Máquina rentada", "id"),
        FieldSpec("fecha_inicio", format="date-time", description="Inicio del alquiler"),
        FieldSpec("fecha_fin", format="date-time", description="Fin del alquiler"),
        FieldSpec("estado", description="Estado del alquiler"),
    ),
)

PAGOS = ResourceDefinition(
    collection="pagos",
    path="/pagos",
    label="Pago",
    schema_name="Pago",
    tag="Pagos",
    fields=(
        FieldSpec("alquilerId", description="Alquiler al que corresponde el pago"),
        FieldSpec("monto", json_type="number", format="float", description="Monto pagado"),
        FieldSpec("metodo", description="Método de pago"),
        FieldSpec("fecha_pago", format="date-time", description="Fecha del pago"),
        FieldSpec("usuarioId", required=False, description="Usuario que realizó el pago"),
        FieldSpec("fecha", required=False, format="date-time", description="Fecha de registro del pago"),
    ),
)

DISTRIBUIDORES = ResourceDefinition(
    collection="distribuidores",
    path="/distribuidores",
    label="Distribuidor",
    schema_name="Distribuidor",
    tag="Distribuidores",
    fields=(
        FieldSpec("nombre", description="Razón social"),
        FieldSpec("correo", format="email", description="Correo de contacto"),
        FieldSpec("telefono", description="Teléfono de contacto"),
        FieldSpec("direccion", description="Dirección"),
    ),
)

RESENAS = ResourceDefinition(
    collection="resenas",
    path="/resenas",
    label="Reseña",
    schema_name="Resena",
    tag="Reseñas",
    feminine=True,
    fields=(
        FieldSpec("usuarioId", description="Autor de la reseña"),
        FieldSpec("productoId", description="Máquina reseñada"),
        FieldSpec("calificacion", json_type="integer", description="Calificación de 1 a 5"),
        FieldSpec("comentario", allow_empty=True, description="Comentario (puede ir vacío)"),
    ),
    validators=(
        range_validator("calificacion", 1, 5, "La calificación debe estar entre 1 y 5."),
    ),
)

CATEGORIAS = ResourceDefinition(
    collection="categorias",
    path="/categorias",
    label="Categoría",
    schema_name="Categoria",
    tag="Categorías",
    feminine=True,
    fields=(
        FieldSpec("nombre", description="Nombre de la categoría"),
        FieldSpec("descripcion", description="Descripción"),
    ),
)

UBICACIONES = ResourceDefinition(
    collection="ubicaciones",
    path="/ubicaciones",
    label="Ubicación",
    schema_name="Ubicacion",
    tag="Ubicaciones",
    feminine=True,
    fields=(
        FieldSpec("nombre", description="Nombre de la sucursal"),
        FieldSpec("direccion", description="Dirección"),
        FieldSpec("latitud", json_type="number", format="float", description="Latitud (0 es válida)"),
        FieldSpec("longitud", json_type="number", format="float", description="Longitud (0 es válida)"),
    ),
)

SOPORTE = ResourceDefinition(
    collection="soporte",
    path="/soporte",
    label="Solicitud de soporte",
    success_label="Solicitud",
    schema_name="SolicitudSoporte",
    tag="Soporte",
    feminine=True,
    fields=(
        FieldSpec("usuarioId", description="Usuario que abre la solicitud"),
        FieldSpec("descripcion", description="Descripción del problema"),
        FieldSpec("fecha", format="date-time", description="Fecha de la solicitud"),
        FieldSpec("estado", description="Estado de la solicitud"),
    ),
)

TRABAJADORES = ResourceDefinition(
    collection="trabajadores",
    path="/trabajadores",
    label="Trabajador",
    schema_name="Trabajador",
    tag="Trabajadores",
    fields=(
        FieldSpec("nombre", description="Nombre completo"),
        FieldSpec("puesto", description="Puesto"),
        FieldSpec("salario", json_type="number", format="float", description="Salario"),
        FieldSpec("fechaContratacion", format="date-time", description="Fecha de contratación"),
    ),
)

RESOURCES: Tuple[ResourceDefinition, ...] = (
    USUARIOS,
    MAQUINAS,
    ALQUILERES,
    PAGOS,
    DISTRIBUIDORES,
    RESENAS,
    CATEGORIAS,
    UBICACIONES,
    SOPORTE,
    TRABAJADORES,
)

RESOURCES_BY_COLLECTION: Dict[str, ResourceDefinition] = {
    definition.collection: definition for definition in RESOURCES
}
