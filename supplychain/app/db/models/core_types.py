import enum


class Role(str, enum.Enum):
    admin = "ADMIN"
    gestionnaire_approvisionnement = "GESTIONNAIRE_APPROVISIONNEMENT"
    responsable_achats = "RESPONSABLE_ACHATS"
    superviseur_logistique = "SUPERVISEUR_LOGISTIQUE"
    chef_production = "CHEF_PRODUCTION"
    planificateur = "PLANIFICATEUR"
    superviseur_production = "SUPERVISEUR_PRODUCTION"
    gestionnaire_commercial = "GESTIONNAIRE_COMMERCIAL"
    responsable_logistique = "RESPONSABLE_LOGISTIQUE"
    superviseur_livraisons = "SUPERVISEUR_LIVRAISONS"


class SupplyOrderStatus(str, enum.Enum):
    en_attente = "EN_ATTENTE"
    en_cours = "EN_COURS"
    recue = "RECUE"


class ProductionOrderStatus(str, enum.Enum):
    en_attente = "EN_ATTENTE"
    en_production = "EN_PRODUCTION"
    termine = "TERMINE"
    bloque = "BLOQUE"


class CustomerOrderStatus(str, enum.Enum):
    en_preparation = "EN_PREPARATION"
    en_route = "EN_ROUTE"
    livree = "LIVREE"


class DeliveryStatus(str, enum.Enum):
    planifiee = "PLANIFIEE"
    en_cours = "EN_COURS"
    livree = "LIVREE"


# Statuts qui bloquent la suppression du parent
ACTIVE_SUPPLY_ORDER_STATUSES = {SupplyOrderStatus.en_attente, SupplyOrderStatus.en_cours}
ACTIVE_PRODUCTION_ORDER_STATUSES = {ProductionOrderStatus.en_attente, ProductionOrderStatus.en_production}
ACTIVE_CUSTOMER_ORDER_STATUSES = {CustomerOrderStatus.en_preparation, CustomerOrderStatus.en_route}
