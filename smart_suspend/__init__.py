"""smart-suspend: arbitrate proxy engine suspension between network and idle signals"""
