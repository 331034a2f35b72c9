"""
Localized response messages.

The request language is detected from the ``lng`` query parameter first,
then from the ``Accept-Language`` header, and falls back to the default
language (English).
"""

from typing import Annotated

from fastapi import Depends, Request

from event_locator.core.config import settings

MESSAGES: dict[str, dict[str, str]] = {
    # Auth
    "user_registered": {
        "en": "User registered successfully",
        "es": "Usuario registrado correctamente",
        "fr": "Utilisateur enregistré avec succès",
    },
    "login_successful": {
        "en": "Login successful",
        "es": "Inicio de sesión correcto",
        "fr": "Connexion réussie",
    },
    "profile_updated": {
        "en": "Profile updated successfully",
        "es": "Perfil actualizado correctamente",
        "fr": "Profil mis à jour avec succès",
    },
    "password_changed": {
        "en": "Password changed successfully",
        "es": "Contraseña cambiada correctamente",
        "fr": "Mot de passe modifié avec succès",
    },
    # Events
    "event_created": {
        "en": "Event created successfully",
        "es": "Evento creado correctamente",
        "fr": "Événement créé avec succès",
    },
    "event_updated": {
        "en": "Event updated successfully",
        "es": "Evento actualizado correctamente",
        "fr": "Événement mis à jour avec succès",
    },
    "event_deleted": {
        "en": "Event deleted successfully",
        "es": "Evento eliminado correctamente",
        "fr": "Événement supprimé avec succès",
    },
    # Errors
    "validation_failed": {
        "en": "Validation failed",
        "es": "La validación ha fallado",
        "fr": "La validation a échoué",
    },
    "email_exists": {
        "en": "User with this email already exists",
        "es": "Ya existe un usuario con este correo electrónico",
        "fr": "Un utilisateur avec cet e-mail existe déjà",
    },
    "invalid_credentials": {
        "en": "Invalid email or password",
        "es": "Correo electrónico o contraseña no válidos",
        "fr": "E-mail ou mot de passe invalide",
    },
    "incorrect_password": {
        "en": "Current password is incorrect",
        "es": "La contraseña actual es incorrecta",
        "fr": "Le mot de passe actuel est incorrect",
    },
    "token_missing": {
        "en": "No authentication token, authorization denied",
        "es": "No hay token de autenticación, autorización denegada",
        "fr": "Aucun jeton d'authentification, autorisation refusée",
    },
    "token_invalid": {
        "en": "Token is not valid",
        "es": "El token no es válido",
        "fr": "Le jeton n'est pas valide",
    },
    "event_not_found": {
        "en": "Event not found",
        "es": "Evento no encontrado",
        "fr": "Événement introuvable",
    },
    "user_not_found": {
        "en": "User not found",
        "es": "Usuario no encontrado",
        "fr": "Utilisateur introuvable",
    },
    "not_event_owner": {
        "en": "Not authorized to modify this event",
        "es": "No está autorizado para modificar este evento",
        "fr": "Vous n'êtes pas autorisé à modifier cet événement",
    },
    "coordinates_required": {
        "en": "Latitude and longitude are required",
        "es": "La latitud y la longitud son obligatorias",
        "fr": "La latitude et la longitude sont obligatoires",
    },
    "category_required": {
        "en": "Category is required",
        "es": "La categoría es obligatoria",
        "fr": "La catégorie est obligatoire",
    },
    "category_exists": {
        "en": "Category already exists",
        "es": "La categoría ya existe",
        "fr": "La catégorie existe déjà",
    },
    "location_not_set": {
        "en": "Location not set. Please update your profile with your location.",
        "es": "Ubicación no establecida. Actualice su perfil con su ubicación.",
        "fr": "Position non définie. Veuillez mettre à jour votre profil avec votre position.",
    },
    "server_error": {
        "en": "An unexpected error occurred. Please try again later.",
        "es": "Se produjo un error inesperado. Inténtelo de nuevo más tarde.",
        "fr": "Une erreur inattendue s'est produite. Veuillez réessayer plus tard.",
    },
}


def translate(key: str, language: str | None = None, default: str | None = None) -> str:
    """
    Look up a message by key.

    Falls back to the default language, then to ``default``, then to the key.
    """
    entry = MESSAGES.get(key)
    if entry is None:
        return default if default is not None else key
    lang = language or settings.DEFAULT_LANGUAGE
    return entry.get(lang) or entry.get(settings.DEFAULT_LANGUAGE) or default or key


def resolve_language(request: Request) -> str:
    """Pick the response language for a request."""
    supported = settings.supported_languages_list

    requested = request.query_params.get("lng")
    if requested and requested.lower() in supported:
        return requested.lower()

    header = request.headers.get("accept-language", "")
    # e.g. "fr-CA,fr;q=0.9,en;q=0.8"; entries are tried in the order sent
    for part in header.split(","):
        tag = part.split(";")[0].strip().lower()
        if not tag:
            continue
        primary = tag.split("-")[0]
        if primary in supported:
            return primary

    return settings.DEFAULT_LANGUAGE


async def get_language(request: Request) -> str:
    """FastAPI dependency returning the request language."""
    return resolve_language(request)


RequestLanguage = Annotated[str, Depends(get_language)]
