"""
Translation lookup.

translate(language, key) returns the display string for a key, or the key
itself when no translation exists (unknown language or unknown key).
"""

from __future__ import annotations

from typing import Callable


Translator = Callable[[str, str], str]


TRANSLATIONS: dict[str, dict[str, str]] = {
    "en": {
        "app_title": "GPA Calculator",
        "semester_gpa_card_title": "Semester GPA",
        "semester_gpa_card_desc": "Compute your semester average from your modules",
        "annual_gpa_card_title": "Annual GPA",
        "annual_gpa_card_desc": "Compute your annual average from both semesters",
        "settings": "Settings",
        "back": "Back",
        "semester_gpa_title": "Semester GPA",
        "no_modules_yet": "No modules added yet.",
        "grade_th": "Grade",
        "coeff_th": "Coeff",
        "credits_th": "Credits",
        "edit": "Edit",
        "delete": "Delete",
        "add_new_module": "Add new module",
        "delete_all_modules": "Delete all modules",
        "show_result": "Show result",
        "annual_gpa_title": "Annual GPA",
        "annual_info": "How it works",
        "s1_title": "First semester",
        "s2_title": "Second semester",
        "gpa_placeholder": "Average",
        "credits_placeholder": "Credits",
        "set_credits_prompt": "Set the credits required to pass with debt",
        "clear": "Clear",
        "calculation_method": "Calculation method",
        "add_new_weighting": "Add new weighting",
        "set_credits": "Required credits",
        "set_credits_option_30": "30 credits",
        "set_credits_option_45": "45 credits",
        "theme": "Theme",
        "light_theme": "Light",
        "dark_theme": "Dark",
        "theme_auto": "Automatic",
        "language": "Language",
        "save_settings": "Remember my data",
        "save_changes": "Clear all data",
        "save_changes_subtitle": "Delete every module, setting and saved value",
        "privacy_policy": "Privacy policy",
        "add_module_title": "Add module",
        "edit_module_title": "Edit module",
        "module_name_label": "Module name",
        "coeff_label": "Coefficient",
        "credits_label": "Credits",
        "calc_module_gpa": "Module grade",
        "grade_td_label": "TD",
        "grade_tp_label": "TP",
        "grade_exam_label": "Exam",
        "save": "Save",
        "cancel": "Cancel",
        "ok": "OK",
        "confirm": "Confirm",
        "semester_result_title": "Semester result",
        "annual_result_title": "Annual result",
        "result_label": "Average",
        "credits_label_result": "Credits",
        "remark_label": "Remark",
        "remark_excellent": "Excellent",
        "remark_pass": "Pass",
        "remark_poor": "Poor",
        "status_pass": "Passed",
        "status_debt": "Passed with debt",
        "status_fail": "Failed",
        "annual_info_modal_title": "About the annual average",
        "annual_info_modal_p1": (
            "The annual average is the mean of both semester averages. "
            "A semester with an average of 10 or more grants all of its 30 credits."
        ),
        "privacy_policy_title": "Privacy policy",
        "privacy_policy_intro": "Your data never leaves this device.",
        "privacy_policy_h1": "Stored data",
        "privacy_policy_p1": "Modules and settings are kept in a local file only when saving is enabled.",
        "alert_title": "Warning",
        "confirm_change_calc_method": "Changing the calculation method deletes all modules. Continue?",
        "confirm_delete_all_modules": "Delete all modules?",
        "confirm_clear_all_data": "Delete all saved data?",
        "custom_method_title": "New weighting",
        "weight_td_label": "TD %",
        "weight_tp_label": "TP %",
        "weight_exam_label": "Exam %",
        "error_module_name_required": "Please enter a module name.",
        "error_no_modules": "Add at least one module first.",
        "error_invalid_annual_values": "Please enter valid averages for both semesters.",
        "error_weights_sum": "The weights must add up to 100%.",
    },
    "fr": {
        "app_title": "Calculateur de moyenne",
        "semester_gpa_card_title": "Moyenne semestrielle",
        "semester_gpa_card_desc": "Calculez votre moyenne du semestre à partir de vos modules",
        "annual_gpa_card_title": "Moyenne annuelle",
        "annual_gpa_card_desc": "Calculez votre moyenne annuelle à partir des deux semestres",
        "settings": "Paramètres",
        "back": "Retour",
        "semester_gpa_title": "Moyenne semestrielle",
        "no_modules_yet": "Aucun module pour l'instant.",
        "grade_th": "Note",
        "coeff_th": "Coef",
        "credits_th": "Crédits",
        "edit": "Modifier",
        "delete": "Supprimer",
        "add_new_module": "Ajouter un module",
        "delete_all_modules": "Supprimer tous les modules",
        "show_result": "Afficher le résultat",
        "annual_gpa_title": "Moyenne annuelle",
        "annual_info": "Fonctionnement",
        "s1_title": "Premier semestre",
        "s2_title": "Deuxième semestre",
        "gpa_placeholder": "Moyenne",
        "credits_placeholder": "Crédits",
        "set_credits_prompt": "Définir les crédits requis pour passer avec dette",
        "clear": "Effacer",
        "calculation_method": "Méthode de calcul",
        "add_new_weighting": "Ajouter une pondération",
        "set_credits": "Crédits requis",
        "set_credits_option_30": "30 crédits",
        "set_credits_option_45": "45 crédits",
        "theme": "Thème",
        "light_theme": "Clair",
        "dark_theme": "Sombre",
        "theme_auto": "Automatique",
        "language": "Langue",
        "save_settings": "Mémoriser mes données",
        "save_changes": "Effacer toutes les données",
        "save_changes_subtitle": "Supprimer tous les modules, paramètres et valeurs",
        "privacy_policy": "Politique de confidentialité",
        "add_module_title": "Ajouter un module",
        "edit_module_title": "Modifier le module",
        "module_name_label": "Nom du module",
        "coeff_label": "Coefficient",
        "credits_label": "Crédits",
        "calc_module_gpa": "Note du module",
        "grade_td_label": "TD",
        "grade_tp_label": "TP",
        "grade_exam_label": "Examen",
        "save": "Enregistrer",
        "cancel": "Annuler",
        "ok": "OK",
        "confirm": "Confirmer",
        "semester_result_title": "Résultat du semestre",
        "annual_result_title": "Résultat annuel",
        "result_label": "Moyenne",
        "credits_label_result": "Crédits",
        "remark_label": "Mention",
        "remark_excellent": "Excellent",
        "remark_pass": "Admis",
        "remark_poor": "Insuffisant",
        "status_pass": "Admis",
        "status_debt": "Admis avec dette",
        "status_fail": "Ajourné",
        "annual_info_modal_title": "À propos de la moyenne annuelle",
        "annual_info_modal_p1": (
            "La moyenne annuelle est la moyenne des deux semestres. "
            "Un semestre validé (10 ou plus) accorde ses 30 crédits."
        ),
        "privacy_policy_title": "Politique de confidentialité",
        "privacy_policy_intro": "Vos données ne quittent jamais cet appareil.",
        "privacy_policy_h1": "Données enregistrées",
        "privacy_policy_p1": "Les modules et paramètres sont conservés localement si l'enregistrement est activé.",
        "alert_title": "Attention",
        "confirm_change_calc_method": "Changer de méthode supprime tous les modules. Continuer ?",
        "confirm_delete_all_modules": "Supprimer tous les modules ?",
        "confirm_clear_all_data": "Supprimer toutes les données enregistrées ?",
        "custom_method_title": "Nouvelle pondération",
        "weight_td_label": "TD %",
        "weight_tp_label": "TP %",
        "weight_exam_label": "Examen %",
        "error_module_name_required": "Veuillez saisir le nom du module.",
        "error_no_modules": "Ajoutez d'abord au moins un module.",
        "error_invalid_annual_values": "Veuillez saisir des moyennes valides pour les deux semestres.",
        "error_weights_sum": "La somme des pondérations doit être 100 %.",
    },
    "ar": {
        "app_title": "حاسبة المعدل",
        "semester_gpa_card_title": "المعدل السداسي",
        "semester_gpa_card_desc": "احسب معدل السداسي من مقاييسك",
        "annual_gpa_card_title": "المعدل السنوي",
        "annual_gpa_card_desc": "احسب معدلك السنوي من السداسيين",
        "settings": "الإعدادات",
        "back": "رجوع",
        "semester_gpa_title": "المعدل السداسي",
        "no_modules_yet": "لم تتم إضافة أي مقياس بعد.",
        "grade_th": "العلامة",
        "coeff_th": "المعامل",
        "credits_th": "الأرصدة",
        "edit": "تعديل",
        "delete": "حذف",
        "add_new_module": "إضافة مقياس جديد",
        "delete_all_modules": "حذف كل المقاييس",
        "show_result": "عرض النتيجة",
        "annual_gpa_title": "المعدل السنوي",
        "annual_info": "كيف يعمل",
        "s1_title": "السداسي الأول",
        "s2_title": "السداسي الثاني",
        "gpa_placeholder": "المعدل",
        "credits_placeholder": "الأرصدة",
        "set_credits_prompt": "حدد الأرصدة المطلوبة للانتقال بالديون",
        "clear": "مسح",
        "calculation_method": "طريقة الحساب",
        "add_new_weighting": "إضافة نسبة جديدة",
        "set_credits": "الأرصدة المطلوبة",
        "set_credits_option_30": "30 رصيدا",
        "set_credits_option_45": "45 رصيدا",
        "theme": "المظهر",
        "light_theme": "فاتح",
        "dark_theme": "داكن",
        "theme_auto": "تلقائي",
        "language": "اللغة",
        "save_settings": "حفظ بياناتي",
        "save_changes": "مسح كل البيانات",
        "save_changes_subtitle": "حذف كل المقاييس والإعدادات والقيم المحفوظة",
        "privacy_policy": "سياسة الخصوصية",
        "add_module_title": "إضافة مقياس",
        "edit_module_title": "تعديل المقياس",
        "module_name_label": "اسم المقياس",
        "coeff_label": "المعامل",
        "credits_label": "الأرصدة",
        "calc_module_gpa": "علامة المقياس",
        "grade_td_label": "الأعمال الموجهة",
        "grade_tp_label": "الأعمال التطبيقية",
        "grade_exam_label": "الامتحان",
        "save": "حفظ",
        "cancel": "إلغاء",
        "ok": "حسنا",
        "confirm": "تأكيد",
        "semester_result_title": "نتيجة السداسي",
        "annual_result_title": "النتيجة السنوية",
        "result_label": "المعدل",
        "credits_label_result": "الأرصدة",
        "remark_label": "الملاحظة",
        "remark_excellent": "ممتاز",
        "remark_pass": "ناجح",
        "remark_poor": "ضعيف",
        "status_pass": "ناجح",
        "status_debt": "ناجح بديون",
        "status_fail": "راسب",
        "annual_info_modal_title": "حول المعدل السنوي",
        "annual_info_modal_p1": "المعدل السنوي هو متوسط معدلي السداسيين. السداسي الناجح يمنح كل أرصدته الثلاثين.",
        "privacy_policy_title": "سياسة الخصوصية",
        "privacy_policy_intro": "بياناتك لا تغادر هذا الجهاز أبدا.",
        "privacy_policy_h1": "البيانات المحفوظة",
        "privacy_policy_p1": "تحفظ المقاييس والإعدادات محليا فقط عند تفعيل الحفظ.",
        "alert_title": "تنبيه",
        "confirm_change_calc_method": "تغيير طريقة الحساب يحذف كل المقاييس. هل تريد المتابعة؟",
        "confirm_delete_all_modules": "حذف كل المقاييس؟",
        "confirm_clear_all_data": "حذف كل البيانات المحفوظة؟",
        "custom_method_title": "نسبة جديدة",
        "weight_td_label": "الأعمال الموجهة %",
        "weight_tp_label": "الأعمال التطبيقية %",
        "weight_exam_label": "الامتحان %",
        "error_module_name_required": "يرجى إدخال اسم المقياس.",
        "error_no_modules": "أضف مقياسا واحدا على الأقل.",
        "error_invalid_annual_values": "يرجى إدخال معدلات صحيحة للسداسيين.",
        "error_weights_sum": "يجب أن يكون مجموع النسب 100%.",
    },
}


def translate(language: str, key: str) -> str:
    return TRANSLATIONS.get(language, {}).get(key, key)
