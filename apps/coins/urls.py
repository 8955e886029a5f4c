from django.urls import path
from . import views

app_name = 'coins'

urlpatterns = [
    # GET /api/coins/balances/              - Current user's balances
    # GET /api/coins/balance/?group_id=     - One balance (self, dependent, or group creator)
    # GET /api/coins/transactions/          - History by user_id and/or group_id
    path('balances/', views.my_balances, name='my-balances'),
    path('balance/', views.balance, name='balance'),
    path('transactions/', views.transactions, name='transactions'),
]
