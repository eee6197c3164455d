"""Bot commands and the handler that dispatches updates to them."""