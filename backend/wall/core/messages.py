"""User-facing error messages. Clients display these verbatim."""

EMAIL_TAKEN = "Пользователь с таким email уже существует"
# Shared by unknown-email and wrong-password failures so accounts cannot be probed
INVALID_CREDENTIALS = "Неверный email или пароль"
NOT_AUTHENTICATED = "Требуется аутентификация"
PROFILE_NOT_FOUND = "Профиль не найден"
POST_NOT_FOUND = "Пост не найден"
AUTHOR_NOT_FOUND = "Автор поста не найден"
IMAGES_ONLY = "Можно загружать только изображения"
FILE_TOO_LARGE = "Файл слишком большой"
TOO_MANY_IMAGES = "Слишком много изображений"
DATABASE_ERROR = "Ошибка базы данных"

LOGIN_FAILED = "Ошибка при входе"
REGISTER_FAILED = "Ошибка при регистрации"
PROFILE_UPDATE_FAILED = "Ошибка при обновлении профиля"
AVATAR_UPLOAD_FAILED = "Ошибка при загрузке аватара"
